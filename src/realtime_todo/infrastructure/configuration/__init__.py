from realtime_todo.infrastructure.configuration.main_settings import Settings

__all__ = ["Settings"]
