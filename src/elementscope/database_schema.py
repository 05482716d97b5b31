# src/elementscope/database_schema.py

DEFAULT_SCHEMA_SCRIPT = """
CREATE TABLE IF NOT EXISTS elements (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    tagName TEXT,
    elementId TEXT,
    className TEXT,
    url TEXT,
    xpath TEXT,
    cssSelector TEXT,
    attributes TEXT,    -- JSON list of {name, value}
    elementText TEXT,
    timestamp DATETIME DEFAULT CURRENT_TIMESTAMP,
    fullData TEXT       -- The complete payload as JSON
);
CREATE INDEX IF NOT EXISTS idx_elements_url ON elements(url);
"""
