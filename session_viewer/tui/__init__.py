"""Terminal UI for stepping through a reconciled MediaTailor session."""
