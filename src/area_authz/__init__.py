"""Hierarchical area authorization for the KPI dashboard."""

from area_authz.core.authz.resolver import UserAuthorization
from area_authz.core.roles import Role
from area_authz.core.search.controller import HierarchicalSearchController
from area_authz.core.tree.builder import build_area_tree
from area_authz.models.area import Area, AreaNode, UserAreaAssignment
from area_authz.protocols import AreaRepositoryProtocol

__all__ = [
    "Area",
    "AreaNode",
    "AreaRepositoryProtocol",
    "HierarchicalSearchController",
    "Role",
    "UserAreaAssignment",
    "UserAuthorization",
    "build_area_tree",
]
