"""
Models for function calling.
"""
from typing import Dict, Any, Optional
from pydantic import BaseModel, Field, ConfigDict


class ToolCall(BaseModel):
    """A function call requested by the model."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Provider-assigned call identifier, echoed back with the output.")
    function_name: str = Field(..., description="Name of the function the model wants to call.")
    arguments: Dict[str, Any] = Field(default_factory=dict, description="Parsed call arguments.")
    type: str = "function"


class FunctionOutput(BaseModel):
    """The string output produced for one tool call."""
    model_config = ConfigDict(frozen=True)

    call_id: str
    function_name: str
    output: str


class FunctionDefinition(BaseModel):
    """A caller-defined function schema, read from ``tool_config["functions"]``."""
    name: str
    description: str = ""
    parameters: Dict[str, Any] = Field(default_factory=lambda: {"type": "object", "properties": {}})
    strict: Optional[bool] = None

    model_config = ConfigDict(extra='ignore')
