pytest_plugins = ["starradar.testing.conftest"]
