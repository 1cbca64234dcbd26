from app.models.company import Company

__all__ = ["Company"]
