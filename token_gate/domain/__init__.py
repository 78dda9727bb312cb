"""Framework-free pieces: the response value and the authorization check."""
__all__ = ["auth", "status"]
