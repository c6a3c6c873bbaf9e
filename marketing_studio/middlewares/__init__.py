from marketing_studio.middlewares.body_guard import BodyGuardMiddleware

__all__ = ["BodyGuardMiddleware"]
