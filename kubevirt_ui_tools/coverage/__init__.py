"""Test-suite scanning, coverage reports, scaffolding, test runs, PR and cluster queries."""