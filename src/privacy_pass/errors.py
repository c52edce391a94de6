"""
Error taxonomy.

Two families matter to callers: MalformedInputError means the bytes could not
be read at all, VerificationError means they were read and the cryptography
did not check out. The latter can point at an active adversary and should be
reported separately.
"""

class PrivacyPassError(Exception):
    pass

class MalformedInputError(PrivacyPassError, ValueError):
    pass

class DecodeError(MalformedInputError):
    """Malformed base64, JSON, point encoding or tag byte."""

class VerificationError(PrivacyPassError):
    pass

class CurveMismatchError(VerificationError):
    """A point is not on the configured curve."""

class CommitmentMismatchError(VerificationError):
    """Proof commitments differ from the configured (G, H)."""

class ProofIncompleteError(VerificationError):
    """Proof fields missing, or M and Z arrays of different length."""

class InconsistentProofError(VerificationError):
    """Proof point sets disagree with what was actually exchanged."""

class DigestInequalityError(VerificationError):
    """Recomputed challenge differs from the received one."""

class ProofVerificationFailure(VerificationError):
    """An issuance response was rejected as a whole."""

class InvalidScalarError(PrivacyPassError, ArithmeticError):
    """Scalar has no inverse mod the group order."""

class PointAtInfinityError(PrivacyPassError, ArithmeticError):
    """Group operation produced the identity, which has no encoding."""

class CurveMissError(PrivacyPassError):
    """Hash-to-curve found no valid point within its counter budget."""
