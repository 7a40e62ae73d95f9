"""
Core Pydantic models for the conversation engine.
"""
from typing import Optional, List, Dict, Any, Literal, Union
from pydantic import BaseModel, Field, ConfigDict

from ..tools.models import ToolCall, FunctionOutput
from .api_types import ApiType


class TokenUsage(BaseModel):
    """Model for token usage statistics."""
    model_config = ConfigDict(frozen=True)

    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0

    def __add__(self, other: "TokenUsage") -> "TokenUsage":
        return TokenUsage(
            prompt_tokens=self.prompt_tokens + other.prompt_tokens,
            completion_tokens=self.completion_tokens + other.completion_tokens,
            total_tokens=self.total_tokens + other.total_tokens,
        )


class NormalizedResponse(BaseModel):
    """Provider-agnostic view of one provider API response."""
    model_config = ConfigDict(frozen=True)

    text: str = Field(default="", description="Assistant text content of the response.")
    usage: TokenUsage = Field(default_factory=TokenUsage, description="Token usage for this single call.")
    model: Optional[str] = Field(default=None, description="Model that produced the response.")
    tool_calls: List[ToolCall] = Field(default_factory=list, description="User-defined function calls requested by the model.")
    web_search_results: List[Dict[str, Any]] = Field(default_factory=list)
    code_interpreter_results: List[Dict[str, Any]] = Field(default_factory=list)
    file_search_results: List[Dict[str, Any]] = Field(default_factory=list)
    response_id: Optional[str] = Field(default=None, description="Continuation handle for stateful APIs.")
    api_metadata: Dict[str, Any] = Field(default_factory=dict)
    raw: Optional[Any] = Field(default=None, exclude=True)

    @property
    def has_tool_calls(self) -> bool:
        return bool(self.tool_calls)


class Message(BaseModel):
    """One entry in a conversation transcript. Immutable once appended."""
    model_config = ConfigDict(frozen=True)

    role: Literal["user", "assistant"]
    content: str
    turn: int = Field(..., ge=1)
    usage: Optional[TokenUsage] = None
    tool_calls: List[ToolCall] = Field(default_factory=list)
    web_search_results: List[Dict[str, Any]] = Field(default_factory=list)
    code_interpreter_results: List[Dict[str, Any]] = Field(default_factory=list)
    file_search_results: List[Dict[str, Any]] = Field(default_factory=list)
    response_id: Optional[str] = None
    api_metadata: Dict[str, Any] = Field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"role": self.role, "content": self.content, "turn": self.turn}
        if self.role == "assistant":
            data["usage"] = self.usage.model_dump() if self.usage else None
            data["tool_calls"] = [tc.model_dump() for tc in self.tool_calls]
            data["web_search_results"] = list(self.web_search_results)
            data["code_interpreter_results"] = list(self.code_interpreter_results)
            data["file_search_results"] = list(self.file_search_results)
            data["api_metadata"] = dict(self.api_metadata)
            if self.response_id:
                data["response_id"] = self.response_id
        return data


class ConversationInput(BaseModel):
    """
    Everything one provider call needs beyond the provider configuration.

    Stateless APIs carry the full wire-format history in ``messages``.
    Stateful APIs carry new ``input`` plus the ``previous_response_id``
    continuation handle.
    """
    system_prompt: Optional[str] = None
    messages: List[Dict[str, Any]] = Field(default_factory=list)
    input: Optional[Union[str, List[Dict[str, Any]]]] = None
    previous_response_id: Optional[str] = None
    function_outputs: List[FunctionOutput] = Field(default_factory=list)
    run_id: Optional[str] = None
    is_continuation: bool = False
    turn: int = 0


class ConversationState(BaseModel):
    """Per-conversation accumulator. Created for one run and never shared."""
    messages: List[Message] = Field(default_factory=list)
    turn: int = 0
    previous_response_id: Optional[str] = None
    history: List[Dict[str, Any]] = Field(default_factory=list)
    accumulated_responses: List[NormalizedResponse] = Field(default_factory=list)
    mock_call_count: int = 0

    def next_mock_index(self) -> int:
        self.mock_call_count += 1
        return self.mock_call_count


class TurnResult(BaseModel):
    """Outcome of the function-call loop for one turn."""
    final_response: NormalizedResponse
    all_tool_calls: List[ToolCall] = Field(default_factory=list)
    aggregated_usage: TokenUsage = Field(default_factory=TokenUsage)
    all_responses: List[NormalizedResponse] = Field(default_factory=list)
    iterations: int = 0
    capped: bool = False
    final_input: Optional[ConversationInput] = None


class ProviderConfig(BaseModel):
    """Which provider API to call and how."""
    provider: str
    api: str
    model: str
    temperature: Optional[float] = None
    tools: List[Union[str, Dict[str, Any]]] = Field(default_factory=list)
    tool_config: Dict[str, Any] = Field(default_factory=dict)
    assistant_id: Optional[str] = None
    max_tokens: Optional[int] = None

    @property
    def api_type(self) -> Optional[ApiType]:
        return ApiType.from_config(self.provider, self.api)

    @property
    def tool_names(self) -> List[str]:
        names = []
        for tool in self.tools:
            if isinstance(tool, dict):
                names.append(str(tool.get("type") or tool.get("name")))
            else:
                names.append(str(tool))
        return names


class ConversationParams(BaseModel):
    """Per-conversation inputs."""
    system_prompt: Optional[str] = None
    first_user_message: Optional[str] = None
    interlocutor_prompt: Optional[str] = None
    max_turns: int = Field(default=1, ge=1)
    use_real_llm: bool = False
    mock_function_outputs: Optional[Dict[str, Union[str, Dict[str, Any], List[Any]]]] = None


class ConversationResult(BaseModel):
    """Standardized output record for one conversation."""
    rendered_system_prompt: Optional[str] = None
    rendered_user_prompt: Optional[str] = None
    rendered_prompt: str = ""
    model: str
    provider: str
    api: str
    messages: List[Message] = Field(default_factory=list)
    total_turns: int = 0
    status: str = "completed"
    max_turns: int = 1
    interlocutor_prompt: Optional[str] = None
    response_time_ms: int = 0
    tokens: Optional[TokenUsage] = None
    tools_used: List[str] = Field(default_factory=list)
    web_search_results: List[Dict[str, Any]] = Field(default_factory=list)
    code_interpreter_results: List[Dict[str, Any]] = Field(default_factory=list)
    file_search_results: List[Dict[str, Any]] = Field(default_factory=list)
    previous_response_id: Optional[str] = None

    @property
    def user_messages(self) -> List[Message]:
        return [m for m in self.messages if m.role == "user"]

    @property
    def assistant_messages(self) -> List[Message]:
        return [m for m in self.messages if m.role == "assistant"]

    @property
    def last_assistant_message(self) -> Optional[Message]:
        assistants = self.assistant_messages
        return assistants[-1] if assistants else None

    @property
    def all_tool_calls(self) -> List[ToolCall]:
        return [tc for m in self.assistant_messages for tc in m.tool_calls]

    def messages_for_turn(self, turn: int) -> List[Message]:
        return [m for m in self.messages if m.turn == turn]

    def to_output_data(self) -> Dict[str, Any]:
        """Plain dictionary form consumed by evaluators."""
        data = self.model_dump(exclude={"messages", "tokens"})
        data["messages"] = [m.to_dict() for m in self.messages]
        data["tokens"] = self.tokens.model_dump() if self.tokens else None
        return data
