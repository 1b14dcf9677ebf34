"""graphmem — persistent knowledge graph memory for tool-calling agents.

Layout:
    graphmem/
    ├── config.py          # Env + graphmem.toml configuration, store path resolution
    ├── errors.py          # Exception hierarchy
    ├── graph/
    │   ├── models.py      # Entity / Relation / KnowledgeGraph dataclasses
    │   ├── records.py     # One-JSON-object-per-line record codec
    │   ├── store.py       # Whole-file load/save of the graph
    │   ├── search.py      # Keyword tokenizer + OR matcher
    │   └── manager.py     # KnowledgeGraphManager (the nine operations)
    ├── tools/
    │   └── graph_tools.py # Tool schemas + dispatch
    └── server.py          # JSON-RPC 2.0 over stdio (NDJSON)
"""

__version__ = "1.0.0"
