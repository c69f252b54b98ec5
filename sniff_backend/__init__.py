"""Transport adapters and process-local metrics for the CAN diff sniffer."""
