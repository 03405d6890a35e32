from abc import ABC, abstractmethod


class ThirdParty(ABC):
    @staticmethod
    @abstractmethod
    def check_requirements() -> list[str]:
        pass
