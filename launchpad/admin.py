"""Owner-gated administration of a Registry.

Every operation checks the caller against the registry owner before touching
anything and runs atomically. Parameter changes only affect assets launched
afterwards; existing records keep the values copied at their launch.
"""

from __future__ import annotations

from dataclasses import replace

import structlog

from launchpad.errors import ValidationError
from launchpad.events import (
    FeeRateUpdated,
    FeesClaimed,
    GlobalReservesUpdated,
    MigrationFeeUpdated,
    OwnershipTransferred,
)
from launchpad.models.types import is_valid_address, normalize_address
from launchpad.registry import GlobalParameters, Registry, reject

logger = structlog.get_logger()


class AdminController:
    """Owner operations over a registry's global state and fee accumulator."""

    def __init__(self, registry: Registry) -> None:
        self.registry = registry

    @property
    def owner(self) -> str:
        return self.registry.owner

    def update_global_reserves(
        self,
        virtual_reserve_primary: int,
        virtual_reserve_secondary: int,
        real_reserve_secondary: int,
        *,
        caller: str,
    ) -> GlobalParameters:
        """Overwrite the reserves seeded into future launches.

        Raises:
            AuthorizationError: Caller is not the owner
            ValidationError: A virtual reserve is not positive or the real reserve is negative
        """
        with self.registry.env.atomic():
            self.registry.require_owner(caller)
            if virtual_reserve_primary <= 0 or virtual_reserve_secondary <= 0:
                raise reject(
                    ValidationError("Virtual reserves must be greater than 0"),
                    "update_global_reserves",
                )
            if real_reserve_secondary < 0:
                raise reject(
                    ValidationError("Real reserve cannot be negative"), "update_global_reserves"
                )

            params = replace(
                self.registry.parameters,
                virtual_reserve_primary=virtual_reserve_primary,
                virtual_reserve_secondary=virtual_reserve_secondary,
                real_reserve_secondary=real_reserve_secondary,
            )
            self.registry._replace_parameters(params)
            self.registry.env.emit(
                GlobalReservesUpdated(
                    virtual_reserve_primary, virtual_reserve_secondary, real_reserve_secondary
                )
            )

        logger.info(
            "global_reserves_updated",
            virtual_reserve_primary=virtual_reserve_primary,
            virtual_reserve_secondary=virtual_reserve_secondary,
            real_reserve_secondary=real_reserve_secondary,
        )
        return params

    def update_fee_rate(self, numerator: int, denominator: int, *, caller: str) -> GlobalParameters:
        """Overwrite the trade fee ratio used by future launches.

        Raises:
            AuthorizationError: Caller is not the owner
            ValidationError: denominator <= 0 or numerator outside [0, denominator]
        """
        with self.registry.env.atomic():
            self.registry.require_owner(caller)
            if denominator <= 0:
                raise reject(
                    ValidationError("Fee denominator must be greater than 0"), "update_fee_rate"
                )
            if numerator < 0 or numerator > denominator:
                raise reject(
                    ValidationError(f"Fee ratio out of range: {numerator}/{denominator}"),
                    "update_fee_rate",
                )

            params = replace(
                self.registry.parameters,
                fee_numerator=numerator,
                fee_denominator=denominator,
            )
            self.registry._replace_parameters(params)
            self.registry.env.emit(FeeRateUpdated(numerator, denominator))

        logger.info("fee_rate_updated", fee_numerator=numerator, fee_denominator=denominator)
        return params

    def update_migration_fee(self, value: int, *, caller: str) -> GlobalParameters:
        with self.registry.env.atomic():
            self.registry.require_owner(caller)
            if value < 0:
                raise reject(
                    ValidationError("Migration fee cannot be negative"), "update_migration_fee"
                )

            params = replace(self.registry.parameters, migration_fee=value)
            self.registry._replace_parameters(params)
            self.registry.env.emit(MigrationFeeUpdated(value))

        logger.info("migration_fee_updated", migration_fee=value)
        return params

    def claim_fees(self, recipient: str, *, caller: str) -> int:
        """Pay every accumulated fee to recipient.

        The accumulator is zeroed before the payout, under the registry's
        reentrancy guard, so a re-entering recipient cannot claim twice.

        Returns:
            The amount paid (may be 0)

        Raises:
            AuthorizationError: Caller is not the owner
            TransferError: The payout was rejected by the recipient
        """
        recipient_norm = normalize_address(recipient)
        with self.registry.env.atomic(), self.registry.guard.guard("claim_fees"):
            self.registry.require_owner(caller)
            if not is_valid_address(recipient_norm):
                raise reject(ValidationError(f"Invalid recipient: {recipient}"), "claim_fees")
            amount = self.registry._take_fees()
            self.registry.env.bank.transfer(self.registry.address, recipient_norm, amount)
            self.registry.env.emit(FeesClaimed(recipient_norm, amount))

        logger.info("fees_claimed", recipient=recipient_norm, amount=amount)
        return amount

    def transfer_ownership(self, new_owner: str, *, caller: str) -> None:
        with self.registry.env.atomic():
            self.registry.require_owner(caller)
            new_owner_norm = normalize_address(new_owner)
            if not is_valid_address(new_owner_norm) or int(new_owner_norm, 16) == 0:
                raise reject(ValidationError(f"Invalid owner: {new_owner}"), "transfer_ownership")
            previous = self.registry.owner
            self.registry._replace_owner(new_owner_norm)
            self.registry.env.emit(OwnershipTransferred(previous, new_owner_norm))

        logger.info("ownership_transferred", previous_owner=previous, new_owner=new_owner_norm)
