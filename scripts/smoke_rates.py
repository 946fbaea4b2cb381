"""Smoke script for the rate editor and converter.

Sequence:
 1. Seed a temp rate file and build the app against it.
 2. Convert USD->EUR and EUR->JPY.
 3. Add, update and delete a currency through the admin forms.
 4. Try deleting USD (should be refused).
 5. Print the final file contents.
"""

import json
import tempfile
from pathlib import Path
from pprint import pprint

from fastapi.testclient import TestClient

from fxdesk.core.config import Settings
from fxdesk.main import create_app


def run():
    with tempfile.TemporaryDirectory() as d:
        rates_file = Path(d) / "exchange-rates.json"
        rates_file.write_text(json.dumps({"USD": 1, "EUR": 0.9, "JPY": 150}))
        app = create_app(settings_override=Settings(data_dir=Path(d)))
        client = TestClient(app)

        results = {}
        results["api_usd_eur"] = client.get(
            "/api/convert", params={"amount": 100, "from": "USD", "to": "EUR"}
        ).json()
        results["api_eur_jpy"] = client.get(
            "/api/convert", params={"amount": 100, "from": "EUR", "to": "JPY"}
        ).json()

        def admin(path, data):
            resp = client.post(path, data=data, follow_redirects=False)
            return resp.headers.get("location")

        results["add_sek"] = admin(
            "/admin/rates/add", {"newCurrency": "SEK", "newRate": "10.4"}
        )
        results["update_sek"] = admin(
            "/admin/rates/update", {"currency": "SEK", "rate": "10.6"}
        )
        results["delete_sek"] = admin("/admin/rates/delete", {"currencyToDelete": "SEK"})
        results["delete_usd"] = admin("/admin/rates/delete", {"currencyToDelete": "USD"})
        results["health"] = client.get("/health").json()
        results["file"] = json.loads(rates_file.read_text())
        pprint(results)


if __name__ == "__main__":
    run()
