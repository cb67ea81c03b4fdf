"""Shared Kernel Domain Layer"""

from src.service.shared_kernel.domain.entity.principal_entity import Principal, PrincipalRole

__all__ = ['Principal', 'PrincipalRole']
