"""Read OPC UA nodeset XML files into typed nodes sorted so parents come first."""

__version__ = "0.1.0"