"""
Event interface of the ProjectFactory contract, as published by the deployment tooling.

Only the event entries are kept; function entries are irrelevant to log decoding.
"""

PROJECT_CREATED_EVENT = "ProjectCreated"

PROJECT_FACTORY_ABI: list[dict] = [
    {
        "anonymous": False,
        "inputs": [
            {"indexed": True, "internalType": "address", "name": "projectAddress", "type": "address"},
            {"indexed": True, "internalType": "address", "name": "platform", "type": "address"},
            {"indexed": True, "internalType": "address", "name": "charity", "type": "address"},
            {"indexed": False, "internalType": "address", "name": "builder", "type": "address"},
            {"indexed": False, "internalType": "uint256", "name": "goal", "type": "uint256"},
            {"indexed": False, "internalType": "uint256", "name": "deadline", "type": "uint256"},
            {"indexed": False, "internalType": "string", "name": "metaCid", "type": "string"},
            {"indexed": False, "internalType": "bool", "name": "deadlineEnabled", "type": "bool"},
        ],
        "name": PROJECT_CREATED_EVENT,
        "type": "event",
    },
]
