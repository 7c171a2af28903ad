from abc import ABC,abstractmethod


class ITurnPrompts(ABC):
    @abstractmethod
    def get_context_header(self) -> str:...
    @abstractmethod
    def get_enhanced_prompt(self, context: str, prompt: str) -> str:...
    @abstractmethod
    def get_start_warning(self) -> str:...
    @abstractmethod
    def get_end_warning(self) -> str:...
