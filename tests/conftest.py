pytest_plugins = [
    "fixtures.identity_fixtures",
    "fixtures.ledger_fixtures",
    "fixtures.settings_fixtures",
]
