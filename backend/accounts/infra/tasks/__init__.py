from .thread_pool_dispatcher import ThreadPoolTaskDispatcher

__all__ = ["ThreadPoolTaskDispatcher"]
