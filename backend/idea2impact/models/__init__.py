from idea2impact.models.registration import Registration

__all__ = ["Registration"]
