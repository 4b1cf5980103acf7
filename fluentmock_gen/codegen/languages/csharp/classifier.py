"""
Member classification for builder generation.

Walks a target's members (own and inherited), decides once per member which
setter family it gets, and resolves references to other targets of the same
batch. The overload and facade synthesizers only ever match on the resulting
:class:`Classification`; they never inspect type shapes themselves.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple

from ....logging_config import get_logger
from ...core.model import (
    GenerationBatch,
    Member,
    MethodDescriptor,
    PropertyDescriptor,
    TargetDescriptor,
    TypeRef,
)
from .builder_info import BuilderInfo, BuilderInfoCache
from .types import buffer_element_type, is_buffer_shape, sequence_element_type

logger = get_logger(__name__)


class Classification(Enum):
    """What kind of setter family a member gets."""

    PLAIN_VALUE = "plain-value"
    NESTED_TARGET = "nested-target"
    POLYMORPHIC_NESTED = "polymorphic-nested"
    SEQUENCE = "sequence"
    BUFFER = "buffer"
    BEHAVIORAL = "behavioral"
    UNREPRESENTABLE = "unrepresentable"


@dataclass(frozen=True)
class NestedCandidate:
    """A batch target whose builder can produce values for a member."""

    target: TargetDescriptor
    info: BuilderInfo
    exact: bool  # False when the target only implements the declared type


@dataclass(frozen=True)
class ClassifiedMember:
    """A member together with its classification and resolved references."""

    member: Member
    declaring_type: TypeRef
    classification: Classification
    candidates: Tuple[NestedCandidate, ...] = ()
    element_type: Optional[TypeRef] = None
    reason: str = ""

    @property
    def name(self) -> str:
        return self.member.name

    @property
    def generates_setters(self) -> bool:
        return self.classification != Classification.UNREPRESENTABLE


@dataclass
class TargetPlan:
    """Everything the synthesizers need to emit one target's builder."""

    target: TargetDescriptor
    info: BuilderInfo
    members: List[ClassifiedMember] = field(default_factory=list)
    facade_members: List[ClassifiedMember] = field(default_factory=list)

    @property
    def buffer_members(self) -> List[ClassifiedMember]:
        return [m for m in self.members if m.classification == Classification.BUFFER]

    @property
    def has_buffers(self) -> bool:
        return any(m.classification == Classification.BUFFER for m in self.members)

    @property
    def setter_members(self) -> List[ClassifiedMember]:
        return [m for m in self.members if m.generates_setters]


def enumerate_members(type_ref: TypeRef) -> List[Tuple[TypeRef, Member]]:
    """
    Own members followed by every transitively inherited interface member.

    Members are de-duplicated by name across declaring types: the first
    declaration of a name wins and later types declaring the same name are
    folded into it. Overloads declared by one type are all kept.
    """
    owners: Dict[str, TypeRef] = {}
    result: List[Tuple[TypeRef, Member]] = []

    for declaring in [type_ref] + type_ref.all_interfaces():
        for member in declaring.members:
            owner = owners.setdefault(member.name, declaring)
            if owner != declaring:
                logger.debug(
                    "%s.%s folded into %s.%s",
                    declaring.qualified_name, member.name, owner.qualified_name, member.name,
                )
                continue
            result.append((declaring, member))
    return result


class MemberClassifier:
    """Classifies members against a whole generation batch."""

    def __init__(self, batch: GenerationBatch, infos: BuilderInfoCache):
        self.batch = batch
        self.infos = infos

    def plan(self, target: TargetDescriptor) -> TargetPlan:
        """Classify every member of ``target``."""
        plan = TargetPlan(target=target, info=self.infos.get_info(target.type))

        for declaring, member in enumerate_members(target.type):
            classified = self.classify(member, declaring)
            plan.facade_members.append(classified)

            if member.name in target.ignored_member_names:
                logger.debug("%s.%s ignored", target.display_name, member.name)
                continue
            if not classified.generates_setters:
                logger.debug("%s.%s skipped: %s", target.display_name, member.name, classified.reason)
            plan.members.append(classified)

        logger.debug(
            "%s: %d members, %d with setters",
            target.display_name, len(plan.members), len(plan.setter_members),
        )
        return plan

    def classify(self, member: Member, declaring_type: TypeRef) -> ClassifiedMember:
        if isinstance(member, PropertyDescriptor):
            return self._classify_property(member, declaring_type)
        if isinstance(member, MethodDescriptor):
            return self._classify_method(member, declaring_type)
        return ClassifiedMember(
            member, declaring_type, Classification.UNREPRESENTABLE,
            reason=f"{member.kind.value} members are not supported",
        )

    def _classify_property(self, prop: PropertyDescriptor, declaring_type: TypeRef) -> ClassifiedMember:
        declared = prop.type

        buffer_element = buffer_element_type(declared)
        if buffer_element is not None:
            return ClassifiedMember(prop, declaring_type, Classification.BUFFER, element_type=buffer_element)

        sequence_element = sequence_element_type(declared)
        if sequence_element is not None:
            return ClassifiedMember(
                prop, declaring_type, Classification.SEQUENCE,
                candidates=self.element_candidates(sequence_element),
                element_type=sequence_element,
            )

        candidates = self.nested_candidates(declared)
        if any(candidate.exact for candidate in candidates):
            return ClassifiedMember(prop, declaring_type, Classification.NESTED_TARGET, candidates=candidates)
        if candidates:
            return ClassifiedMember(prop, declaring_type, Classification.POLYMORPHIC_NESTED, candidates=candidates)

        return ClassifiedMember(prop, declaring_type, Classification.PLAIN_VALUE)

    def _classify_method(self, method: MethodDescriptor, declaring_type: TypeRef) -> ClassifiedMember:
        if method.is_generic:
            return ClassifiedMember(
                method, declaring_type, Classification.UNREPRESENTABLE,
                reason="generic methods are not supported",
            )
        if any(is_buffer_shape(p.type) for p in method.parameters):
            return ClassifiedMember(
                method, declaring_type, Classification.UNREPRESENTABLE,
                reason="buffer parameters cannot be matched",
            )
        return ClassifiedMember(method, declaring_type, Classification.BEHAVIORAL)

    def nested_candidates(self, declared: TypeRef) -> Tuple[NestedCandidate, ...]:
        """
        Batch targets that can supply a value of ``declared``.

        The target identical to ``declared`` (if any) comes first as the exact
        candidate; targets that transitively implement it follow in batch order.
        """
        candidates = []
        exact = self.batch.find(declared)
        if exact is not None:
            candidates.append(NestedCandidate(exact, self.infos.get_info(exact.type), True))
        for target in self.batch.find_implementations(declared):
            candidates.append(NestedCandidate(target, self.infos.get_info(target.type), False))
        return tuple(candidates)

    def element_candidates(self, element: TypeRef) -> Tuple[NestedCandidate, ...]:
        """Only an exact batch member types a list builder; implementers go through ``Add<TDerivedBuilder>``."""
        exact = self.batch.find(element)
        if exact is None:
            return ()
        return (NestedCandidate(exact, self.infos.get_info(exact.type), True),)


def describe_plan(plan: TargetPlan) -> List[Tuple[str, str, str]]:
    """(member, kind, classification) rows for diagnostics output."""
    rows = []
    for classified in plan.facade_members:
        member = classified.member
        label = classified.classification.value
        if classified.candidates:
            label += " -> " + ", ".join(c.info.builder_name for c in classified.candidates)
        if member.name in plan.target.ignored_member_names:
            label = "ignored"
        rows.append((member.name, member.kind.value, label))
    return rows
