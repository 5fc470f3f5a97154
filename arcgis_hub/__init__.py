"""arcgis-hub: lets an MCP-capable agent discover and query ArcGIS portal layers."""

__version__ = "0.1.0"
