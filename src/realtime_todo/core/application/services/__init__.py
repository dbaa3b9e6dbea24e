from realtime_todo.core.application.services.todo_mutation_service import TodoMutationService

__all__ = ["TodoMutationService"]
