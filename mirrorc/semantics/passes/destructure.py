# semantics/passes/destructure.py
"""
Destructuring contract synthesis.

Every structural product type a pattern names gets exactly one contract per
compilation: its arity, its component types, and a bind operation that
reads all components of an instance in canonical order.

Sources, in order of precedence:
- a contract handed in by the caller (CompileOptions.contracts)
- a contract the foreign class supplies itself (__unapply__ + __match_args__)
- synthesis from the type's metadata: struct fields for native types, the
  reflected TypeMetadata for foreign ones
"""
from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field
from operator import attrgetter
from typing import Any, Dict, Mapping, Optional

from mirrorc.internals.errors import raise_internal_error
from mirrorc.mirror.model import DestructuringContract, contract_from
from mirrorc.semantics.passes.collect import TypeEntry
from mirrorc.semantics.typesys import StructType

logger = logging.getLogger(__name__)


@dataclass
class ContractTable:
    by_identity: Dict[str, DestructuringContract] = field(default_factory=dict)

    def get(self, identity: str) -> Optional[DestructuringContract]:
        return self.by_identity.get(identity)

    def __len__(self) -> int:
        return len(self.by_identity)


class ContractSynthesizer:
    def __init__(self, user_contracts: Optional[Mapping[str, DestructuringContract]] = None) -> None:
        self.user_contracts = dict(user_contracts or {})
        self.table = ContractTable()

    def available(self, entry: TypeEntry) -> bool:
        return (entry.identity in self.user_contracts or entry.user_contract is not None
                or entry.struct is not None or entry.metadata is not None)

    def contract_for(self, entry: TypeEntry) -> DestructuringContract:
        cached = self.table.get(entry.identity)
        if cached is not None:
            return cached

        supplied = self.user_contracts.get(entry.identity) or entry.user_contract
        if supplied is not None:
            contract = self._complete(supplied, entry)
            logger.debug("using supplied contract for %s (arity %d)", entry.identity, contract.arity)
        elif entry.struct is not None:
            contract = synthesize_native(entry.struct)
            logger.debug("synthesized native contract for %s (arity %d)", entry.identity, contract.arity)
        elif entry.metadata is not None:
            contract = contract_from(entry.metadata)
            logger.debug("synthesized reflected contract for %s (arity %d)", entry.identity, contract.arity)
        else:
            raise_internal_error("CE0004", identity=entry.identity)

        self.table.by_identity[entry.identity] = contract
        return contract

    @staticmethod
    def _complete(contract: DestructuringContract, entry: TypeEntry) -> DestructuringContract:
        """Borrow component types and labels from the type's own metadata when the arities agree."""
        if contract.component_types or entry.arity != contract.arity:
            return contract
        if entry.struct is not None:
            return dataclasses.replace(contract, component_types=entry.struct.types,
                                       labels=contract.labels or entry.struct.labels)
        if entry.metadata is not None:
            return dataclasses.replace(contract, component_types=entry.metadata.types,
                                       labels=contract.labels or entry.metadata.labels)
        return contract


def synthesize_native(struct: StructType) -> DestructuringContract:
    getters = tuple(attrgetter(label) for label in struct.labels)

    def bind(instance: Any) -> tuple[Any, ...]:
        return tuple(getter(instance) for getter in getters)

    return DestructuringContract(
        identity=struct.identity,
        arity=len(getters),
        bind=bind,
        component_types=struct.types,
        labels=struct.labels,
    )
