"""
Repair script generation.

The script is a Ruby snippet meant to be pasted into a production console:
it moves every listed transaction back to PENDING and enqueues a
FinalizeTransaction job with the selected status.

`generate` is a pure function of (drafts, status): the same inputs always
produce byte-identical text.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, List, Sequence

from .models import RenderPair, TransactionDraft, TransactionStatus
from .rules import BLOCK_SEPARATOR, DRAFT_STATUS_MESSAGE, EXTERNAL_IDENTIFIER_LITERAL, NULL_LITERAL, UNDEFINED_LITERAL

BLOCK_TEMPLATE = """  {{
    id: {id},
    external_identifier: {external_identifier}
  }}"""

SCRIPT_TEMPLATE = """
txns = [
{blocks}
];

txn_repo = TransactionRepository.new
txns.each do |txn|
  # set the external identifier and move the transaction back to pending
  txn_id = txn[:id]
  txn_ei = txn[:external_identifier]
  new_status = Transaction::TransactionStatuses::{status}
  new_status_message = '{status_message}'
  TransactionRepository.new.update_monadic(txn_id,
                                           {{ status: Transaction::TransactionStatuses::PENDING,
                                             external_identifier: txn_ei }})
  # copy the external identifier into the payment method extras
  t = txn_repo.find_by_id(txn_id).value!
  payment_method = t.payment_method
  extra = payment_method['extra'] || {{}}
  new_payment_method = payment_method.merge('extra' => extra.merge({{ 'external_identifier' => t.external_identifier }}))
  txn_repo.update_monadic(txn_id, payment_method: new_payment_method)
  # enqueue the transaction
  FinalizeTransaction.enqueue(
    txn_id,
    new_status,
    new_status_message,
    Time.now
  )
end
"""

_TWO_SPACE_PREFIX = re.compile(r"^( {2})", re.MULTILINE)


@dataclass(frozen=True)
class Artifact:
    text: str
    pairs: List[RenderPair]


def _literal(value: Any) -> str:
    if value is None:
        return NULL_LITERAL
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _id_literal(draft: TransactionDraft) -> str:
    # A source without an id key renders differently from an explicit null id.
    if "id" not in draft.model_fields_set:
        return UNDEFINED_LITERAL
    return _literal(draft.id)


def render_pairs(drafts: Sequence[TransactionDraft]) -> List[RenderPair]:
    return [
        RenderPair(id=f'"{_id_literal(d)}"', external_identifier=EXTERNAL_IDENTIFIER_LITERAL)
        for d in drafts
    ]


def render_script(pairs: Sequence[RenderPair], status: TransactionStatus) -> str:
    blocks = BLOCK_SEPARATOR.join(
        BLOCK_TEMPLATE.format(id=p.id, external_identifier=p.external_identifier) for p in pairs
    )
    text = SCRIPT_TEMPLATE.format(
        blocks=blocks,
        status=status.value,
        status_message=DRAFT_STATUS_MESSAGE,
    )
    return _TWO_SPACE_PREFIX.sub("  ", text)


def generate(drafts: Sequence[TransactionDraft], status: TransactionStatus) -> Artifact:
    pairs = render_pairs(drafts)
    return Artifact(text=render_script(pairs, status), pairs=pairs)
