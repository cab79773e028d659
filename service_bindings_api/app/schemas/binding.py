"""
Pydantic schemas for service bindings.

A ``ServiceBinding`` is what an accessor discovers: a bound service
instance with its optional name, label and plan, its tags and its
credentials.  A ``ServiceBindingView`` is the narrow projection the
listing endpoint renders; it is built per request and thrown away.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class ServiceBinding(BaseModel):
    """A discovered binding to an external service instance."""

    name: Optional[str] = Field(None, description="Service instance name")
    label: Optional[str] = Field(None, description="Service offering label, e.g. ``postgres``")
    plan: Optional[str] = Field(None, description="Service plan the instance was created with")
    type: Optional[str] = Field(None, description="Binding type, e.g. ``postgresql``")
    provider: Optional[str] = Field(None, description="Binding provider")
    tags: List[str] = Field(default_factory=list)
    credentials: Dict[str, Any] = Field(default_factory=dict)


class ServiceBindingView(BaseModel):
    """Name and plan of a binding; either may be absent."""

    name: Optional[str] = None
    plan: Optional[str] = None

    @classmethod
    def from_binding(cls, binding: ServiceBinding) -> "ServiceBindingView":
        return cls(name=binding.name, plan=binding.plan)
