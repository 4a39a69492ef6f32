from branch_composer.application.ports.vcs_backend import VersionControlBackend

__all__ = ["VersionControlBackend"]
