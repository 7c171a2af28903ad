from chatmemory.Domain import ITurnPrompts

class TurnPrompts(ITurnPrompts):
    def get_context_header(self) -> str:
        return "Previous conversation context:\n\n"

    def get_enhanced_prompt(self, context: str, prompt: str) -> str:
        INSTRUCTION = (
            "Please provide a comprehensive response that builds upon the conversation history above. "
            "If the user is asking for more detail or clarification, expand on previous points rather than repeating them."
        )
        return f"{context}\n\nCurrent User Question: {prompt}\n\n{INSTRUCTION}"

    def get_start_warning(self) -> str:
        return "Agent memory disabled: userId and conversationId are required."

    def get_end_warning(self) -> str:
        return "\n\nWarning: agent memory disabled because userId and conversationId were not provided."
