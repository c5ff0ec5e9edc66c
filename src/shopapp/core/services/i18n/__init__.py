from .localization import Localizer, MessageKeys

__all__ = ["Localizer", "MessageKeys"]
