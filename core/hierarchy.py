# core/hierarchy.py

"""
Read-only reporting over the field hierarchy.

Inputs are the scope-filtered agent and panchayath collections; this module
never decides visibility itself.
"""

from typing import Dict, Iterable, List, Optional

from pydantic import BaseModel

from core.logging_config import logger
from models.agent import ROLE_LADDER, ROLE_RANK, Agent, superior_role
from models.enums import AgentRole
from models.panchayath import Panchayath

ALL = "all"


# ============================================================
# Filter / result models
# ============================================================
class HierarchyFilters(BaseModel):
    search: str = ""
    panchayath_id: str = ALL
    role: str = ALL


class RoleCounts(BaseModel):
    total: int = 0
    coordinator: int = 0
    supervisor: int = 0
    group_leader: int = 0
    pro: int = 0

    def per_role(self) -> Dict[str, int]:
        return {
            AgentRole.coordinator.value: self.coordinator,
            AgentRole.supervisor.value: self.supervisor,
            AgentRole.group_leader.value: self.group_leader,
            AgentRole.pro.value: self.pro,
        }


class AgentNode(BaseModel):
    agent: Agent
    children: List["AgentNode"] = []


class PanchayathGroup(BaseModel):
    # None collects agents whose panchayath is not in the collection
    panchayath: Optional[Panchayath] = None
    roots: List[AgentNode] = []
    agent_count: int = 0


class HierarchySummary(BaseModel):
    counts: RoleCounts
    agents: List[Agent]
    tree: List[PanchayathGroup]


# ============================================================
# Filtering & counting
# ============================================================
def matches_search(agent: Agent, search: str) -> bool:
    """Case-insensitive substring match on name, phone or ward."""
    needle = (search or "").strip().lower()
    if not needle:
        return True
    return any(
        needle in value.lower()
        for value in (agent.name, agent.phone, agent.ward)
        if value
    )


def filter_agents(agents: Iterable[Agent], filters: HierarchyFilters) -> List[Agent]:
    return [
        agent for agent in agents
        if matches_search(agent, filters.search)
        and (filters.panchayath_id == ALL or agent.panchayath_id == filters.panchayath_id)
        and (filters.role == ALL or agent.role == filters.role)
    ]


def count_roles(agents: Iterable[Agent]) -> RoleCounts:
    counts = {role: 0 for role in ROLE_LADDER}
    for agent in agents:
        counts[agent.role] += 1

    return RoleCounts(
        total=sum(counts.values()),
        coordinator=counts[AgentRole.coordinator],
        supervisor=counts[AgentRole.supervisor],
        group_leader=counts[AgentRole.group_leader],
        pro=counts[AgentRole.pro],
    )


# ============================================================
# Ladder rules
# ============================================================
def is_valid_superior(agent: Agent, superior: Optional[Agent]) -> bool:
    """A superior sits exactly one rung up, in the same panchayath."""
    if superior is None:
        return False
    return (
        superior.panchayath_id == agent.panchayath_id
        and superior.role == superior_role(agent.role)
    )


def superior_options(agents: Iterable[Agent], panchayath_id: str, role: AgentRole) -> List[Agent]:
    """Agents that may be chosen as the superior of a new `role` agent."""
    wanted = superior_role(role)
    if wanted is None:
        return []
    return sorted(
        (a for a in agents if a.panchayath_id == panchayath_id and a.role == wanted),
        key=lambda a: a.name.lower(),
    )


# ============================================================
# Tree construction
# ============================================================
def _sort_key(agent: Agent):
    return (ROLE_RANK[agent.role], agent.name.lower(), agent.id)


def build_panchayath_tree(agents: List[Agent]) -> List[AgentNode]:
    """
    Link agents of one panchayath through `superior_id`.

    Agents whose superior is missing, outside this set, or not exactly one
    rung up are attached at the root rather than dropped.
    """
    by_id = {agent.id: agent for agent in agents}
    nodes = {agent.id: AgentNode(agent=agent) for agent in agents}
    roots: List[AgentNode] = []

    for agent in sorted(agents, key=_sort_key):
        superior = by_id.get(agent.superior_id) if agent.superior_id else None
        if is_valid_superior(agent, superior):
            nodes[superior.id].children.append(nodes[agent.id])
            continue

        if agent.superior_id:
            logger.debug(f"Agent {agent.id} has unresolved superior {agent.superior_id}; attached at root")
        roots.append(nodes[agent.id])

    return roots


def group_by_panchayath(agents: List[Agent], panchayaths: List[Panchayath], filters: HierarchyFilters) -> List[PanchayathGroup]:
    buckets: Dict[Optional[str], List[Agent]] = {}
    for agent in agents:
        buckets.setdefault(agent.panchayath_id, []).append(agent)

    ordered = sorted(panchayaths, key=lambda p: (p.name.lower(), p.id))
    show_all = filters.panchayath_id == ALL

    groups: List[PanchayathGroup] = []
    for panchayath in ordered:
        if not show_all and panchayath.id != filters.panchayath_id:
            continue
        members = buckets.pop(panchayath.id, [])
        if show_all and not members:
            continue
        groups.append(PanchayathGroup(
            panchayath=panchayath,
            roots=build_panchayath_tree(members),
            agent_count=len(members),
        ))

    leftovers = [agent for members in buckets.values() for agent in members]
    if leftovers:
        groups.append(PanchayathGroup(
            panchayath=None,
            roots=build_panchayath_tree(leftovers),
            agent_count=len(leftovers),
        ))

    return groups


# ============================================================
# Entry point
# ============================================================
def summarize(agents: Iterable[Agent], panchayaths: Iterable[Panchayath], filters: Optional[HierarchyFilters] = None) -> HierarchySummary:
    filters = filters or HierarchyFilters()
    panchayaths = list(panchayaths)

    filtered = sorted(filter_agents(agents, filters), key=lambda a: (a.name.lower(), a.id))

    return HierarchySummary(
        counts=count_roles(filtered),
        agents=filtered,
        tree=group_by_panchayath(filtered, panchayaths, filters),
    )
