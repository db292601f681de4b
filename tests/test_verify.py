# tests/test_verify.py
import copy

import pytest

from execledger.certificate.issuer import CertificateIssuer
from execledger.chain.chain import ExecutionChain
from execledger.chain.integrity import verify_chain_integrity
from execledger.core.errors import IntegrityViolation, SignatureInvalid
from execledger.verify.verifier import verify_artifacts


def create_sealed_chain(chain_id="verify-test-001"):
    chain = ExecutionChain(chain_id)
    chain.append("created", "builder-bot", "Acme Corp", {})
    chain.append("updated", "builder-bot", "Acme Corp", {"x": 1})
    chain.append("updated", "builder-bot", "Acme Corp", {"y": 2})
    chain.resolve()
    issuer = CertificateIssuer(issuer="Acme Provenance")
    cert = issuer.issue(chain)
    return chain, issuer, cert


@pytest.fixture
def sealed():
    return create_sealed_chain()


def test_valid_chain_integrity(sealed):
    chain, _, _ = sealed
    report = verify_chain_integrity(chain.events)
    assert report.valid is True
    assert report.broken_sequences == []
    assert report.to_dict() == {"valid": True, "broken_sequences": []}


def test_empty_chain_is_intact():
    assert verify_chain_integrity([]).valid is True


def test_three_event_scenario(sealed):
    chain, issuer, cert = sealed
    assert issuer.verify(cert) is True

    report = verify_artifacts(chain.to_artifact(), cert, issuer.public_key_artifact())
    result = report.to_result_artifact()
    assert result["verified"] is True
    assert result["hash_chain_intact"] is True
    assert result["certificate_signature_valid"] is True
    assert result["chain_hash"] == chain.chain_hash
    assert cert.event_count == 3

    # rewrite event #2 in storage without rehashing
    events = chain.to_artifact()["events"]
    events[1]["payload"] = {"x": 99}
    integrity = verify_chain_integrity(events)
    assert integrity.valid is False
    assert integrity.broken_sequences == [2]


def test_tamper_reports_only_that_event(sealed):
    chain, _, _ = sealed
    events = chain.to_artifact()["events"]
    events[2]["agent_name"] = "intruder"
    report = verify_chain_integrity(events)
    assert report.broken_sequences == [3]
    assert [f.category for f in report.failures] == ["event_hash"]


def test_all_broken_sequences_reported(sealed):
    chain, _, _ = sealed
    events = chain.to_artifact()["events"]
    events[0]["organization"] = "Evil Corp"
    events[2]["payload"] = {"y": 3}
    assert verify_chain_integrity(events).broken_sequences == [1, 3]


def test_broken_prev_hash_link(sealed):
    chain, _, _ = sealed
    events = chain.to_artifact()["events"]
    events[1]["prev_hash"] = "deadbeef" * 8
    report = verify_chain_integrity(events)
    assert report.valid is False
    assert 2 in report.broken_sequences
    assert any(f.category == "prev_hash" for f in report.failures)


def test_first_event_must_link_to_genesis(sealed):
    chain, _, _ = sealed
    events = chain.to_artifact()["events"]
    events[0]["prev_hash"] = "1" * 64
    report = verify_chain_integrity(events)
    assert 1 in report.broken_sequences


def test_removed_event_detected(sealed):
    chain, _, _ = sealed
    events = chain.to_artifact()["events"]
    del events[1]
    report = verify_chain_integrity(events)
    assert report.valid is False
    assert any(f.category == "sequence" for f in report.failures)


def test_unserializable_event_is_reported_not_raised(sealed):
    chain, _, _ = sealed
    events = chain.to_artifact()["events"]
    events[0]["payload"] = {"bad": float("inf")}
    report = verify_chain_integrity(events)
    assert report.broken_sequences == [1]
    assert report.failures[0].category == "serialization"


def test_tampered_payload_fails_only_integrity_check(sealed):
    chain, issuer, cert = sealed
    artifact = chain.to_artifact()
    artifact["events"][1]["payload"] = {"x": 99}

    report = verify_artifacts(artifact, cert, issuer.public_key_artifact())
    assert report.verified is False
    assert report.check("hash_chain_intact").passed is False
    assert "2" in report.check("hash_chain_intact").detail
    assert report.check("chain_hash_match").passed is True
    assert report.check("certificate_signature_valid").passed is True
    assert report.to_result_artifact()["hash_chain_intact"] is False


def test_rehashed_tamper_breaks_chain_hash(sealed):
    chain, issuer, cert = sealed
    forged = ExecutionChain("verify-test-001")
    forged.append("created", "builder-bot", "Acme Corp", {})
    forged.append("updated", "builder-bot", "Acme Corp", {"x": 99})
    forged.append("updated", "builder-bot", "Acme Corp", {"y": 2})
    forged.resolve()

    report = verify_artifacts(forged.to_artifact(), cert, issuer.public_key_artifact())
    assert report.check("hash_chain_intact").passed is True
    assert report.check("chain_hash_match").passed is False
    assert report.verified is False


def test_certificate_bound_to_chain_id(sealed):
    chain, issuer, cert = sealed
    artifact = chain.to_artifact()
    artifact["chain_id"] = "some-other-chain"
    report = verify_artifacts(artifact, cert, issuer.public_key_artifact())
    assert report.check("chain_hash_match").passed is False
    assert "chain_id" in report.check("chain_hash_match").detail


def test_wrong_public_key_fails_signature(sealed):
    chain, _, cert = sealed
    stranger = CertificateIssuer()
    report = verify_artifacts(chain.to_artifact(), cert, stranger.public_key_artifact())
    assert report.check("certificate_signature_valid").passed is False
    assert report.check("hash_chain_intact").passed is True


def test_resigned_certificate_with_swapped_key_fails(sealed):
    chain, issuer, cert = sealed
    forger = CertificateIssuer(issuer="Acme Provenance")
    forged = forger.issue(chain)
    # verifier pinned to the real issuer's key
    report = verify_artifacts(chain.to_artifact(), forged, issuer.public_key_artifact())
    assert report.check("certificate_signature_valid").passed is False


def test_embedded_key_used_when_none_supplied(sealed):
    chain, _, cert = sealed
    assert verify_artifacts(chain.to_artifact(), cert).verified is True


def test_raise_for_failure(sealed):
    chain, issuer, cert = sealed
    verify_artifacts(chain.to_artifact(), cert, issuer.public_key_artifact()).raise_for_failure()

    artifact = chain.to_artifact()
    artifact["events"][1]["payload"] = {"x": 99}
    with pytest.raises(IntegrityViolation) as excinfo:
        verify_artifacts(artifact, cert, issuer.public_key_artifact()).raise_for_failure()
    assert excinfo.value.broken_sequences == [2]

    bad_sig = cert.to_dict()
    bad_sig["signature"] = "00" * 64
    with pytest.raises(SignatureInvalid):
        verify_artifacts(chain.to_artifact(), bad_sig, issuer.public_key_artifact()).raise_for_failure()


def test_verification_is_repeatable(sealed):
    chain, issuer, cert = sealed
    artifact = chain.to_artifact()
    snapshot = copy.deepcopy(artifact)
    first = verify_artifacts(artifact, cert, issuer.public_key_artifact())
    second = verify_artifacts(artifact, cert, issuer.public_key_artifact())
    assert first.verified and second.verified
    assert artifact == snapshot


def test_report_str_lists_every_check(sealed):
    chain, issuer, cert = sealed
    text = str(verify_artifacts(chain.to_artifact(), cert, issuer.public_key_artifact()))
    assert sum(line.startswith("PASS  ") for line in text.splitlines()) == 3
    assert "ALL CHECKS PASSED" in text


def test_integrity_violation_carries_broken_sequences(sealed):
    chain, issuer, cert = sealed
    artifact = chain.to_artifact()
    artifact["events"][0]["payload"] = {"tampered": True}
    artifact["events"][2]["payload"] = {"tampered": True}
    report = verify_artifacts(artifact, cert, issuer.public_key_artifact())
    assert not report.integrity
    with pytest.raises(IntegrityViolation) as excinfo:
        report.raise_for_failure()
    assert excinfo.value.broken_sequences == [1, 3]


def test_non_string_event_hash_is_reported_not_raised(sealed):
    chain, issuer, cert = sealed
    artifact = chain.to_artifact()
    artifact["events"][1]["event_hash"] = 12345

    report = verify_artifacts(artifact, cert, issuer.public_key_artifact())
    assert report.verified is False
    assert report.check("hash_chain_intact").passed is False
    assert report.check("chain_hash_match").passed is False
    assert "event #2 is not a string" in report.check("chain_hash_match").detail
    assert report.check("certificate_signature_valid").passed is True
