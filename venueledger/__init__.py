"""VenueLedger: venue slot booking with payment and ledger reconciliation."""
