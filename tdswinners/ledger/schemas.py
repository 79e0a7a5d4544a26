from pydantic import BaseModel, Field

from tdswinners.ledger.interface import VoteAccount
from tdswinners.utils.identity import ValidatorIdentity


class VoteAccountRecord(BaseModel):
    node_pubkey: str
    root_slot: int | None = Field(default=None, ge=0)
    stake: int = Field(default=0, ge=0)

    def to_vote_account(self) -> VoteAccount:
        return VoteAccount(
            node_identity=ValidatorIdentity.from_string(self.node_pubkey),
            confirmed_slot=self.root_slot,
            stake=self.stake,
        )


class GenesisRecord(BaseModel):
    bootstrap_leader: str
    balances: dict[str, int] = Field(default_factory=dict)
    vote_accounts: list[VoteAccountRecord] = Field(default_factory=list)


class EntryRecord(BaseModel):
    slot: int = Field(ge=0)
    balances: dict[str, int] = Field(default_factory=dict)
    vote_accounts: list[VoteAccountRecord] = Field(default_factory=list)


class LeaderScheduleRecord(BaseModel):
    first_slot: int = Field(default=0, ge=0)
    leaders: list[str] = Field(default_factory=list)


def parse_balances(raw: dict[str, int]) -> dict[ValidatorIdentity, int]:
    return {ValidatorIdentity.from_string(k): int(v) for k, v in raw.items()}


def parse_vote_accounts(
    records: list[VoteAccountRecord],
) -> dict[ValidatorIdentity, VoteAccount]:
    out: dict[ValidatorIdentity, VoteAccount] = {}
    for rec in records:
        account = rec.to_vote_account()
        out[account.node_identity] = account
    return out
