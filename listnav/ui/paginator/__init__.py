from .paginator_widget import PaginatorBar

__all__ = ["PaginatorBar"]
