"""Instruction types and the registry that maps them to editors.

An instruction type is what the proposer picks in a slot's selector.  The
registry keeps the catalogue in display order and knows, for every type,
which editor factory produces its :class:`~proposalkit.types.InstructionResult`.

Built-in types ship with proposalkit.  Integrations can register their own
types, or override the editor factory of a built-in one.
"""

from __future__ import annotations

import difflib
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Callable, Iterable

if TYPE_CHECKING:
    from proposalkit.editors import EditorContext, InstructionEditor

__all__ = [
    "AVAILABLE_AFTER_PROGRAM_GOVERNANCE",
    "BUILT_IN_INSTRUCTIONS",
    "EditorFactory",
    "InstructionType",
    "InstructionTypeRegistry",
    "Instructions",
]


class Instructions(str, Enum):
    """Identifiers of the built-in instruction types."""

    TRANSFER = "transfer"
    PROGRAM_UPGRADE = "program-upgrade"
    MINT = "mint"
    BASE64 = "base64"
    NONE = "none"
    CREATE_ASSOCIATED_TOKEN_ACCOUNT = "create-associated-token-account"
    CLOSE_TOKEN_ACCOUNT = "close-token-account"
    REALM_CONFIG = "realm-config"
    GRANT = "grant"
    CLAWBACK = "clawback"
    DEPOSIT_INTO_VOLT = "deposit-into-volt"
    WITHDRAW_FROM_VOLT = "withdraw-from-volt"
    CREATE_SOLEND_OBLIGATION_ACCOUNT = "create-solend-obligation-account"
    INIT_SOLEND_OBLIGATION_ACCOUNT = "init-solend-obligation-account"
    DEPOSIT_RESERVE_LIQUIDITY_AND_OBLIGATION_COLLATERAL = "deposit-reserve-liquidity-and-obligation-collateral"
    REFRESH_SOLEND_OBLIGATION = "refresh-solend-obligation"
    REFRESH_SOLEND_RESERVE = "refresh-solend-reserve"
    WITHDRAW_OBLIGATION_COLLATERAL_AND_REDEEM_RESERVE_LIQUIDITY = "withdraw-obligation-collateral-and-redeem-reserve-liquidity"
    CREATE_NFT_PLUGIN_REGISTRAR = "create-nft-plugin-registrar"
    CONFIGURE_NFT_PLUGIN_COLLECTION = "configure-nft-plugin-collection"
    CREATE_NFT_PLUGIN_MAX_VOTER_WEIGHT = "create-nft-plugin-max-voter-weight"
    MANGO_ADD_ORACLE = "mango-add-oracle"
    MANGO_ADD_SPOT_MARKET = "mango-add-spot-market"
    MANGO_CHANGE_MAX_ACCOUNTS = "mango-change-max-accounts"
    MANGO_CHANGE_PERP_MARKET = "mango-change-perp-market"
    MANGO_CHANGE_REFERRAL_FEE_PARAMS = "mango-change-referral-fee-params"
    MANGO_CHANGE_SPOT_MARKET = "mango-change-spot-market"
    MANGO_CREATE_PERP_MARKET = "mango-create-perp-market"
    FORESIGHT_INIT_MARKET = "foresight-init-market"
    FORESIGHT_INIT_MARKET_LIST = "foresight-init-market-list"
    FORESIGHT_INIT_CATEGORY = "foresight-init-category"
    FORESIGHT_RESOLVE_MARKET = "foresight-resolve-market"
    FORESIGHT_ADD_MARKET_LIST_TO_CATEGORY = "foresight-add-market-list-to-category"
    FORESIGHT_ADD_MARKET_METADATA = "foresight-add-market-metadata"


# Display names, in selector order.
BUILT_IN_INSTRUCTIONS: dict[str, str] = {
    Instructions.TRANSFER: "Transfer Tokens",
    Instructions.PROGRAM_UPGRADE: "Upgrade Program",
    Instructions.MINT: "Mint Tokens",
    Instructions.BASE64: "Execute Custom Instruction",
    Instructions.NONE: "None",
    Instructions.CREATE_ASSOCIATED_TOKEN_ACCOUNT: "Create Associated Token Account",
    Instructions.CLOSE_TOKEN_ACCOUNT: "Close Token Account",
    Instructions.REALM_CONFIG: "Realm Config",
    Instructions.GRANT: "Grant",
    Instructions.CLAWBACK: "Clawback",
    Instructions.DEPOSIT_INTO_VOLT: "Friktion: Deposit into Volt",
    Instructions.WITHDRAW_FROM_VOLT: "Friktion: Withdraw from Volt",
    Instructions.CREATE_SOLEND_OBLIGATION_ACCOUNT: "Solend: Create Obligation Account",
    Instructions.INIT_SOLEND_OBLIGATION_ACCOUNT: "Solend: Init Obligation Account",
    Instructions.DEPOSIT_RESERVE_LIQUIDITY_AND_OBLIGATION_COLLATERAL: "Solend: Deposit Funds",
    Instructions.REFRESH_SOLEND_OBLIGATION: "Solend: Refresh Obligation",
    Instructions.REFRESH_SOLEND_RESERVE: "Solend: Refresh Reserve",
    Instructions.WITHDRAW_OBLIGATION_COLLATERAL_AND_REDEEM_RESERVE_LIQUIDITY: "Solend: Withdraw Funds",
    Instructions.CREATE_NFT_PLUGIN_REGISTRAR: "Create NFT plugin registrar",
    Instructions.CONFIGURE_NFT_PLUGIN_COLLECTION: "Configure NFT plugin collection",
    Instructions.CREATE_NFT_PLUGIN_MAX_VOTER_WEIGHT: "Create NFT plugin max voter weight",
    Instructions.MANGO_ADD_ORACLE: "Mango: Add Oracle",
    Instructions.MANGO_ADD_SPOT_MARKET: "Mango: Add Spot Market",
    Instructions.MANGO_CHANGE_MAX_ACCOUNTS: "Mango: Change Max Accounts",
    Instructions.MANGO_CHANGE_PERP_MARKET: "Mango: Change Perp Market",
    Instructions.MANGO_CHANGE_REFERRAL_FEE_PARAMS: "Mango: Change Referral Fee Params",
    Instructions.MANGO_CHANGE_SPOT_MARKET: "Mango: Change Spot Market",
    Instructions.MANGO_CREATE_PERP_MARKET: "Mango: Create Perp Market",
    Instructions.FORESIGHT_INIT_MARKET: "Foresight: Init Market",
    Instructions.FORESIGHT_INIT_MARKET_LIST: "Foresight: Init Market List",
    Instructions.FORESIGHT_INIT_CATEGORY: "Foresight: Init Category",
    Instructions.FORESIGHT_RESOLVE_MARKET: "Foresight: Resolve Market",
    Instructions.FORESIGHT_ADD_MARKET_LIST_TO_CATEGORY: "Foresight: Add Market List To Category",
    Instructions.FORESIGHT_ADD_MARKET_METADATA: "Foresight: Add Market Metadata",
}

# Once a proposal governs a program's upgrade authority, only these remain selectable
# after the first slot.
AVAILABLE_AFTER_PROGRAM_GOVERNANCE: frozenset[str] = frozenset({Instructions.BASE64.value})

EditorFactory = Callable[["EditorContext"], "InstructionEditor"]


@dataclass(frozen=True)
class InstructionType:
    """A selectable instruction type."""

    id: str
    name: str
    available_after_program_governance: bool = False
    builtin: bool = False


class InstructionTypeRegistry:
    """Ordered catalogue of instruction types and their editor factories."""

    def __init__(self, *, default_factory: EditorFactory | None = None) -> None:
        """
        Args:
            default_factory: Editor factory for types registered without one.
                             Defaults to :class:`~proposalkit.editors.ReportedResultEditor`.
        """
        self._types: dict[str, InstructionType] = {}
        self._factories: dict[str, EditorFactory] = {}
        self._default_factory = default_factory

    @classmethod
    def with_defaults(
        cls,
        *,
        available_after_program_governance: Iterable[str] = AVAILABLE_AFTER_PROGRAM_GOVERNANCE,
    ) -> InstructionTypeRegistry:
        """Create a registry pre-loaded with the built-in instruction types."""
        from proposalkit.editors import Base64Editor, EmptyEditor

        allowed = {_type_key(t) for t in available_after_program_governance}
        registry = cls()
        for type_id, name in BUILT_IN_INSTRUCTIONS.items():
            key = _type_key(type_id)
            registry._types[key] = InstructionType(
                id=key,
                name=name,
                available_after_program_governance=key in allowed,
                builtin=True,
            )
        registry._factories[Instructions.NONE.value] = EmptyEditor
        registry._factories[Instructions.BASE64.value] = Base64Editor
        return registry

    def register(
        self,
        type_id: str,
        name: str,
        factory: EditorFactory | None = None,
        *,
        available_after_program_governance: bool = False,
    ) -> InstructionType:
        """Register a custom instruction type.

        Raises:
            ValueError: If the identifier is empty or already registered.
        """
        key = _type_key(type_id)
        if not key:
            raise ValueError("instruction type id must not be empty")
        if key in self._types:
            raise ValueError(f"Instruction type '{key}' is already registered")
        defn = InstructionType(
            id=key,
            name=name,
            available_after_program_governance=available_after_program_governance,
        )
        self._types[key] = defn
        if factory is not None:
            self._factories[key] = factory
        return defn

    def set_factory(self, type_id: str | InstructionType, factory: EditorFactory) -> None:
        """Replace the editor factory of a registered type."""
        self._factories[self.resolve(type_id).id] = factory

    def get(self, type_id: str | InstructionType) -> InstructionType | None:
        return self._types.get(_type_key(type_id))

    def resolve(self, type_id: str | InstructionType) -> InstructionType:
        """Look up a type, raising ``ValueError`` with a suggestion if unknown."""
        defn = self.get(type_id)
        if defn is not None:
            return defn
        key = _type_key(type_id)
        matches = difflib.get_close_matches(key, self._types.keys(), n=1, cutoff=0.6)
        hint = f" (did you mean '{matches[0]}'?)" if matches else ""
        raise ValueError(f"Unknown instruction type '{key}'{hint}")

    def list(self) -> list[InstructionType]:
        """All registered types, in registration order."""
        return list(self._types.values())

    def __contains__(self, type_id: object) -> bool:
        return isinstance(type_id, (str, InstructionType)) and self.get(type_id) is not None

    def __len__(self) -> int:
        return len(self._types)

    def create_editor(self, type_id: str | InstructionType, context: EditorContext) -> InstructionEditor:
        """Instantiate the editor for a type, bound to a slot's context."""
        defn = self.resolve(type_id)
        factory = self._factories.get(defn.id) or self._default_factory
        if factory is None:
            from proposalkit.editors import ReportedResultEditor

            factory = ReportedResultEditor
        return factory(context)


def _type_key(type_id: str | InstructionType) -> str:
    if isinstance(type_id, InstructionType):
        return type_id.id
    if isinstance(type_id, Instructions):
        return type_id.value
    return str(type_id).strip().lower()
