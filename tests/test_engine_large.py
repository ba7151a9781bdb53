import sys
import os
from decimal import Decimal

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from payments_engine import PaymentsEngine


class TestPaymentsEngineLargeScale:
    def test_1000_clients_interleaved(self, tmp_path):
        """Rows for 1000 clients interleaved round-robin; every client ends at 500."""
        num_clients = 1000
        amounts = [("deposit", "100"), ("deposit", "200.5"), ("withdrawal", "50.25"), ("deposit", "300"), ("withdrawal", "50.25")]
        rows = ["type, client, tx, amount"]
        tx_id = 1

        for kind, amount in amounts:
            for client_id in range(1, num_clients + 1):
                rows.append(f"{kind}, {client_id}, {tx_id}, {amount}")
                tx_id += 1

        csv_file = tmp_path / "large_test.csv"
        csv_file.write_text('\n'.join(rows))

        engine = PaymentsEngine()
        accounts = engine.process_file(str(csv_file))

        assert len(accounts) == num_clients
        assert engine.stats.processed == num_clients * len(amounts)
        assert engine.stats.ignored == 0

        for client_id in range(1, num_clients + 1):
            account = accounts[client_id]
            assert account.available == Decimal("500"), f"Client {client_id}"
            assert account.held == Decimal("0")
            assert account.total == Decimal("500")
            assert account.locked is False

    def test_mixed_dispute_lifecycles(self, tmp_path):
        rows = ["type, client, tx, amount"]

        def tx(client_id, n):
            return client_id * 100 + n

        # 1-10: resolved dispute, then an attempt to dispute a neighbour's deposit
        for client_id in range(1, 11):
            rows.append(f"deposit, {client_id}, {tx(client_id, 1)}, 100")
            rows.append(f"deposit, {client_id}, {tx(client_id, 2)}, 150")
        for client_id in range(1, 11):
            rows.append(f"dispute, {client_id}, {tx(client_id, 1)},")
            rows.append(f"resolve, {client_id}, {tx(client_id, 1)},")
            rows.append(f"dispute, {client_id}, {tx(client_id % 10 + 1, 2)},")

        # 11-20: chargeback, then everything afterwards is ignored
        for client_id in range(11, 21):
            rows.append(f"deposit, {client_id}, {tx(client_id, 1)}, 100")
            rows.append(f"deposit, {client_id}, {tx(client_id, 2)}, 250")
            rows.append(f"dispute, {client_id}, {tx(client_id, 1)},")
            rows.append(f"chargeback, {client_id}, {tx(client_id, 1)},")
            rows.append(f"deposit, {client_id}, {tx(client_id, 3)}, 1000")
            rows.append(f"withdrawal, {client_id}, {tx(client_id, 4)}, 10")

        # 21-30: disputed withdrawal left open
        for client_id in range(21, 31):
            rows.append(f"deposit, {client_id}, {tx(client_id, 1)}, 400")
            rows.append(f"withdrawal, {client_id}, {tx(client_id, 2)}, 100")
            rows.append(f"withdrawal, {client_id}, {tx(client_id, 3)}, 1000")
            rows.append(f"dispute, {client_id}, {tx(client_id, 2)},")

        csv_file = tmp_path / "disputes_test.csv"
        csv_file.write_text('\n'.join(rows))

        accounts = PaymentsEngine().process_file(str(csv_file))

        for client_id in range(1, 11):
            account = accounts[client_id]
            assert account.available == Decimal("250"), f"Client {client_id}"
            assert account.held == Decimal("0")
            assert account.locked is False

        for client_id in range(11, 21):
            account = accounts[client_id]
            assert account.available == Decimal("250"), f"Client {client_id}"
            assert account.held == Decimal("0")
            assert account.total == Decimal("250")
            assert account.locked is True

        for client_id in range(21, 31):
            account = accounts[client_id]
            assert account.available == Decimal("200"), f"Client {client_id}"
            assert account.held == Decimal("100")
            assert account.total == Decimal("300")
            assert account.locked is False

        for account in accounts.values():
            assert account.total == account.available + account.held
