# storefront/services/reconciliation.py
import threading
from dataclasses import dataclass, field
from typing import Callable, Dict, List

import redis
from pydantic import ValidationError

from storefront.domain import lists
from storefront.domain.result import Err, ErrorKind, Ok, Result
from storefront.domain.schemas import CART, LIST_NAMES, WISHLIST, StoredItem, item_model
from storefront.repos.local_store import LocalStore
from storefront.repos.remote_store import RemoteStore
from storefront.services.session import Guest, Session, SessionContext
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class MergeReport:
    """Wynik scalania listy goscia z lista konta po zalogowaniu."""

    list_name: str
    user_id: str
    merged: List[str] = field(default_factory=list)
    dropped: List[str] = field(default_factory=list)
    pending: List[str] = field(default_factory=list)
    error: Err | None = None

    @property
    def complete(self) -> bool:
        return self.error is None and not self.pending


class ReconciliationEngine:
    """
    Decyduje ktory magazyn jest zrodlem prawdy:
    -gosc -> lokalne listy goscia
    -zalogowany -> dokument zdalny, lokalnie tylko mirror (odczyt offline)

    Przejscia sesji (login / logout) przychodza z SessionContext.
    Kazda lista ma swoj lock, operacja trzyma go przez caly round trip,
    kolejne wywolania czekaja w kolejce zamiast sie przeplatac.
    Nic nie wylatuje poza silnik, zawsze Ok / Err.
    """

    def __init__(self, context: SessionContext, local: LocalStore, remote: RemoteStore):
        self.context = context
        self.guest_store = local
        self.remote = remote
        self._mode: Session = Guest()
        self._locks = {name: threading.Lock() for name in LIST_NAMES}
        self._subscribed = False
        self._ready_checked = False

    def start(self) -> None:
        if self._subscribed:
            return
        self.context.subscribe(self.on_session_change)
        self._subscribed = True

    def wait_ready(self, timeout: float | None = None) -> bool:
        """Czeka raz na pierwsza informacje o sesji, kolejne wywolania nic nie robia."""
        if self._ready_checked:
            return self.context.ready.is_set()
        self._ready_checked = True

        ready = self.context.wait_ready(timeout)
        if not ready:
            logger.warning(f"Session context not ready after {timeout}s, staying in guest mode")
        return ready

    @property
    def session(self) -> Session:
        return self._mode

    def mirror(self, user_id: str) -> LocalStore:
        return self.guest_store.scoped(f"mirror:{user_id}")

    # =====================================================
    # SESSION TRANSITIONS
    # =====================================================
    def on_session_change(self, session: Session) -> Dict[str, MergeReport]:
        with self._locks[CART], self._locks[WISHLIST]:
            previous = self._mode

            if previous.authenticated and previous != session:
                self._forget_mirror(previous.user_id)

            self._mode = session

            if not session.authenticated:
                return {}

            #ponowne powiadomienie o tym samym userze jest bezpieczne, merge jest idempotentny
            return {name: self._merge_list(session.user_id, name) for name in LIST_NAMES}

    def _forget_mirror(self, user_id: str) -> None:
        logger.info(f"User {user_id} signed out, clearing local mirror")
        mirror = self.mirror(user_id)
        for name in LIST_NAMES:
            try:
                mirror.clear(name)
            except redis.RedisError as e:
                logger.warning(f"Could not clear mirror {name} for {user_id}: {e}")

    def _merge_list(self, user_id: str, list_name: str) -> MergeReport:
        report = MergeReport(list_name=list_name, user_id=user_id)

        try:
            guest_items = self.guest_store.load(list_name)
        except redis.RedisError as e:
            logger.error(f"Could not read guest {list_name}: {e}")
            report.error = Err(ErrorKind.TRANSPORT_FAILURE, f"Could not read local {list_name}: {e}")
            return report

        remote = self.remote.latest(user_id, list_name)
        if not remote.ok:
            report.error = remote
            report.pending = [i.id for i in guest_items]
            logger.warning(f"Merge of {list_name} for {user_id} postponed: {remote.message}")
            return report

        remote_ids = {i.id for i in remote.items}
        to_add = [i for i in guest_items if i.id not in remote_ids]
        report.dropped = [i.id for i in guest_items if i.id in remote_ids]
        latest = remote.items

        try:
            for n, item in enumerate(to_add):
                result = self.remote.add_one(user_id, list_name, item)
                if not result.ok:
                    report.error = result
                    break

                latest = result.items
                report.merged.append(item.id)

                #po kazdym udanym dopisaniu w magazynie goscia zostaje tylko reszta
                remaining = to_add[n + 1:]
                if remaining:
                    self.guest_store.save(list_name, remaining)
                else:
                    self.guest_store.clear(list_name)

            if guest_items and not to_add:
                #wszystko juz bylo na koncie (remote wygrywa)
                self.guest_store.clear(list_name)

            self._save_mirror(user_id, list_name, latest)
        except redis.RedisError as e:
            logger.error(f"Local store failed during merge of {list_name}: {e}")
            report.error = Err(ErrorKind.TRANSPORT_FAILURE, f"Local store failed: {e}")

        report.pending = [i.id for i in to_add if i.id not in report.merged]

        logger.info(
            f"Merged {list_name} for {user_id}: merged={report.merged} "
            f"dropped={report.dropped} pending={report.pending}"
        )
        return report

    def _save_mirror(self, user_id: str, list_name: str, items: List[StoredItem]) -> None:
        #mirror jest best effort, blad redisa nie cofa udanej operacji zdalnej
        try:
            self.mirror(user_id).save(list_name, items)
        except redis.RedisError as e:
            logger.warning(f"Could not refresh mirror {list_name} for {user_id}: {e}")

    # =====================================================
    # QUERY
    # =====================================================
    def load(self, list_name: str) -> Result:
        if list_name not in LIST_NAMES:
            return Err(ErrorKind.INVALID_INPUT, f"Unknown list: {list_name}")

        with self._locks[list_name]:
            session = self._mode
            try:
                if not session.authenticated:
                    return Ok(self.guest_store.load(list_name))

                result = self.remote.latest(session.user_id, list_name)
                if result.ok:
                    self._save_mirror(session.user_id, list_name, result.items)
                    return result

                #fallback na ostatni znany mirror
                fallback = self.mirror(session.user_id).load(list_name)
                return Err(result.kind, result.message, fallback)
            except redis.RedisError as e:
                logger.error(f"Local store failed while loading {list_name}: {e}")
                return Err(ErrorKind.TRANSPORT_FAILURE, f"Local store failed: {e}")

    def count(self, list_name: str) -> int:
        return lists.count(list_name, self.load(list_name).items)

    def contains(self, list_name: str, item_id: str) -> bool:
        return lists.find(self.load(list_name).items, item_id) is not None

    # =====================================================
    # COMMANDS
    # =====================================================
    def _run(
        self,
        list_name: str,
        remote_op: Callable[[str], Result],
        local_op: Callable[[List[StoredItem]], Result],
    ) -> Result:
        with self._locks[list_name]:
            session = self._mode
            try:
                if session.authenticated:
                    result = remote_op(session.user_id)
                    if result.ok:
                        self._save_mirror(session.user_id, list_name, result.items)
                    return result

                result = local_op(self.guest_store.load(list_name))
                if result.ok and result.changed:
                    self.guest_store.save(list_name, result.items)
                return result
            except redis.RedisError as e:
                logger.error(f"Local store failed on {list_name}: {e}")
                return Err(ErrorKind.TRANSPORT_FAILURE, f"Local store failed: {e}")
            except Exception as e:
                logger.exception(f"Unexpected error on {list_name}: {e}")
                return Err(ErrorKind.TRANSPORT_FAILURE, f"Unexpected error: {e}")

    def _coerce(self, list_name: str, item: StoredItem | dict) -> StoredItem:
        model = item_model(list_name)
        if isinstance(item, model):
            return item
        data = item.to_doc() if isinstance(item, StoredItem) else item
        return model.model_validate(data)

    def add_item(self, list_name: str, item: StoredItem | dict) -> Result:
        if list_name not in LIST_NAMES:
            return Err(ErrorKind.INVALID_INPUT, f"Unknown list: {list_name}")

        try:
            item = self._coerce(list_name, item)
        except ValidationError as e:
            return Err(ErrorKind.INVALID_INPUT, f"Invalid {list_name} item: {e.errors()[:1]}")

        def local(items):
            if lists.find(items, item.id) is not None:
                return Ok(items, changed=False)
            return Ok(lists.add(items, item))

        logger.info(f"Adding {item.id} to {list_name} ({self._mode})")
        return self._run(
            list_name,
            lambda uid: self.remote.add_one(uid, list_name, item),
            local,
        )

    def remove_item(self, list_name: str, item_id: str) -> Result:
        if list_name not in LIST_NAMES:
            return Err(ErrorKind.INVALID_INPUT, f"Unknown list: {list_name}")

        def local(items):
            remaining = lists.remove(items, item_id)
            if remaining is None:
                return Err(ErrorKind.NOT_FOUND, f"Item {item_id} not found in {list_name}", items)
            return Ok(remaining)

        logger.info(f"Removing {item_id} from {list_name} ({self._mode})")
        return self._run(
            list_name,
            lambda uid: self.remote.remove_one(uid, list_name, item_id),
            local,
        )

    def set_quantity(self, item_id: str, quantity: int) -> Result:
        def local(items):
            updated = lists.set_quantity(items, item_id, quantity)
            if updated is None:
                return Err(ErrorKind.NOT_FOUND, f"Item {item_id} not found in cart", items)
            return Ok(updated)

        logger.info(f"Setting quantity of {item_id} to {quantity} ({self._mode})")
        return self._run(
            CART,
            lambda uid: self.remote.update_one(uid, CART, item_id, {"quantity": quantity}),
            local,
        )

    def change_quantity(self, item_id: str, delta: int) -> Result:
        def remote(uid):
            latest = self.remote.latest(uid, CART)
            if not latest.ok:
                return latest
            current = lists.find(latest.items, item_id)
            if current is None:
                return Err(ErrorKind.NOT_FOUND, f"Item {item_id} not found in cart", latest.items)
            return self.remote.update_one(uid, CART, item_id, {"quantity": current.quantity + delta})

        def local(items):
            current = lists.find(items, item_id)
            if current is None:
                return Err(ErrorKind.NOT_FOUND, f"Item {item_id} not found in cart", items)
            return Ok(lists.set_quantity(items, item_id, current.quantity + delta))

        logger.info(f"Changing quantity of {item_id} by {delta} ({self._mode})")
        return self._run(CART, remote, local)

    def toggle_item(self, list_name: str, item: StoredItem | dict) -> Result:
        """Dodaje jesli nie ma, usuwa jesli jest (przycisk serduszka)."""
        if list_name not in LIST_NAMES:
            return Err(ErrorKind.INVALID_INPUT, f"Unknown list: {list_name}")

        try:
            item = self._coerce(list_name, item)
        except ValidationError as e:
            return Err(ErrorKind.INVALID_INPUT, f"Invalid {list_name} item: {e.errors()[:1]}")

        def remote(uid):
            latest = self.remote.latest(uid, list_name)
            if not latest.ok:
                return latest
            if lists.find(latest.items, item.id) is not None:
                return self.remote.remove_one(uid, list_name, item.id)
            return self.remote.add_one(uid, list_name, item)

        def local(items):
            remaining = lists.remove(items, item.id)
            if remaining is None:
                return Ok(lists.add(items, item))
            return Ok(remaining)

        return self._run(list_name, remote, local)

    def checkout(self) -> Result:
        """
        Zamyka koszyk zalogowanego usera:
        -gosc albo pusty koszyk -> INVALID_INPUT
        -najpierw dosyla reszte koszyka goscia (jak przy logowaniu)
        -po sukcesie czysci koszyk zdalny i mirror, Ok.items = zamowione pozycje
        """
        with self._locks[CART]:
            session = self._mode
            if not session.authenticated:
                return Err(ErrorKind.INVALID_INPUT, "Sign in to check out")

            user_id = session.user_id
            report = self._merge_list(user_id, CART)
            if report.error is not None:
                return Err(report.error.kind, report.error.message)

            latest = self.remote.latest(user_id, CART)
            if not latest.ok:
                return latest
            if not latest.items:
                return Err(ErrorKind.INVALID_INPUT, "Your cart is empty")

            cleared = self.remote.replace(user_id, CART, [])
            if not cleared.ok:
                return Err(cleared.kind, cleared.message, latest.items)

            self._save_mirror(user_id, CART, [])

            logger.info(f"Checked out {len(latest.items)} cart lines for {user_id}")
            return Ok(latest.items)
