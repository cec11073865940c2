"""FormDesk: role-based dynamic forms backend."""
