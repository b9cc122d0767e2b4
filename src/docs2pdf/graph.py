from __future__ import annotations
from dataclasses import dataclass
from typing import Any, List, Optional

@dataclass(frozen=True)
class Node:
    action_name: str
    artifact: str
    exists: bool

def build_chain(root_action: Any, ctx: Any) -> List[Node]:
    """Stages from ``root_action`` down to the first one; each stage has at most one prerequisite."""
    chain: List[Node] = []
    act: Optional[Any] = root_action
    while act is not None:
        path = act.artifact(ctx)
        chain.append(Node(act.name, path.name, path.exists()))
        deps = act.requires(ctx)
        act = deps[0] if deps else None
    return chain

def render_ascii(chain: List[Node]) -> str:
    lines = []
    for depth, node in enumerate(chain):
        status = "exists" if node.exists else "missing"
        lines.append("  " * depth + f"{node.action_name} -> [{node.artifact}] ({status})")
    return "\n".join(lines)
