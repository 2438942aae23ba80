from .pagination import paginate, clamp_page, DEFAULT_PAGE_SIZE

__all__ = ['paginate', 'clamp_page', 'DEFAULT_PAGE_SIZE']
