from branch_composer.infrastructure.git.backend import GitBackend

__all__ = ["GitBackend"]
