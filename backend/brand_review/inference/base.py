from abc import ABC, abstractmethod
from typing import List, Dict


class LLMClient(ABC):
    @abstractmethod
    def generate(self, messages: List[Dict], max_tokens: int, temperature: float) -> str:
        """Generate assistant text from chat messages"""
        pass
