"""
Module builder strategy interface.

The orchestrator tries a fixed, priority-ordered list of builders for every
realm. Each builder claims the pending modules it knows how to build and
returns them; whatever remains is offered to the next builder.
"""

from abc import ABC, abstractmethod
from typing import List, Sequence, Tuple


class ModuleBuilder(ABC):
    """Builds modules of a realm."""

    @abstractmethod
    def build(self, modules: List[str]) -> List[str]:
        """
        Build the given modules.

        Args:
            modules: Names of pending modules

        Returns:
            Names of the modules actually built
        """

    def attempt_build(self, pending: Sequence[str]) -> Tuple[List[str], List[str]]:
        """
        Build what this builder can and report what is left.

        Args:
            pending: Names of pending modules

        Returns:
            Tuple of (built modules, remaining modules), both in pending order
        """
        built = set(self.build(list(pending)))
        return (
            [module for module in pending if module in built],
            [module for module in pending if module not in built],
        )
