"""Storage adapters implementing the paginator ports."""
