from fastapi import Request

from medstock.services.ledger_store import LedgerStore


def get_store(request: Request) -> LedgerStore:
    return request.app.state.store
