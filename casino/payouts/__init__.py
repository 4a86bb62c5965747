"""Pure payout and multiplier calculators."""
