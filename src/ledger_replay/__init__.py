"""Single-pass replay of a client transaction log into account balances."""
