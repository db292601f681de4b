# examples/tamper_demo.py
# Run with: python examples/tamper_demo.py
#
# Records a short workflow, seals it, then edits one event in the exported
# artifact and shows which checks catch it.

import copy

from execledger import ExecutionChain, CertificateIssuer, verify_artifacts, verify_chain_integrity


if __name__ == "__main__":
    chain = ExecutionChain("tamper-demo-001")
    chain.append("created", "builder-bot", "Acme Corp", {})
    chain.append("updated", "builder-bot", "Acme Corp", {"x": 1})
    chain.append("updated", "builder-bot", "Acme Corp", {"y": 2})
    chain.resolve()

    issuer = CertificateIssuer(issuer="Acme Provenance")
    cert = issuer.issue(chain)
    artifact = chain.to_artifact()

    print("=== Untouched artifacts ===")
    print(verify_artifacts(artifact, cert, issuer.public_key_artifact()))

    tampered = copy.deepcopy(artifact)
    tampered["events"][1]["payload"] = {"x": 99}

    print("\n=== Event #2 payload rewritten to {'x': 99} ===")
    print(verify_chain_integrity(tampered["events"]))
    print(verify_artifacts(tampered, cert, issuer.public_key_artifact()))
