"""
Evaluation suite for the consensus engine.

Run everything: pytest evals/ -v
Run one property: pytest evals/tasks/test_security_evals.py -v

No eval touches the network: remote providers are AsyncMock clients,
fake ScoringProviders, or httpx.MockTransport.
"""
