from marketing_studio.routers import assets, auth, generate, history

__all__ = ["assets", "auth", "generate", "history"]
