"""Architecture tests for the IAM bounded context.

These tests enforce DDD architectural boundaries ensuring the IAM
bounded context does not depend on the Brands context. IAM may only
import from shared_kernel, infrastructure (cross-cutting), and its own
sub-packages.
"""

from pytest_archon import archrule


class TestIAMBoundedContextIsolation:
    """Tests that IAM does not import from other bounded contexts.

    IAM manages accounts, sessions and password resets. Brands depends on
    IAM for the owner identity, never the reverse.
    """

    def test_iam_does_not_import_brands(self):
        """IAM bounded context should not depend on Brands context."""
        (
            archrule("iam_no_brands")
            .match("iam*")
            .should_not_import("brands*")
            .check("iam")
        )


class TestIAMLayerBoundaries:
    """Tests for layer rules inside IAM."""

    def test_domain_does_not_import_infrastructure(self):
        """Domain should hold pure business rules only."""
        (
            archrule("iam_domain_no_infrastructure")
            .match("iam.domain*")
            .should_not_import("iam.infrastructure*", "infrastructure*")
            .check("iam")
        )

    def test_domain_does_not_import_crypto(self):
        """Password hashing lives in the application layer."""
        (
            archrule("iam_domain_no_crypto")
            .match("iam.domain*")
            .should_not_import("bcrypt*", "jose*")
            .check("iam")
        )

    def test_domain_does_not_import_frameworks(self):
        (
            archrule("iam_domain_no_frameworks")
            .match("iam.domain*")
            .should_not_import("fastapi*", "starlette*", "sqlalchemy*")
            .check("iam")
        )

    def test_application_does_not_import_infrastructure(self):
        """Application services should depend on ports only."""
        (
            archrule("iam_app_no_infrastructure")
            .match("iam.application*")
            .should_not_import("iam.infrastructure*")
            .check("iam")
        )

    def test_ports_does_not_import_application(self):
        (
            archrule("iam_ports_no_application")
            .match("iam.ports*")
            .should_not_import("iam.application*", "iam.infrastructure*")
            .check("iam")
        )
