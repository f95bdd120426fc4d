#!/usr/bin/env python3
"""MCP Server for the Deferred Contract Calculator.

This server exposes contract amortization calculations as MCP tools,
allowing AI assistants to answer questions about deferred contracts.
"""

import os
import sys
import json
import asyncio
from typing import Any

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import Tool, TextContent

from tools import MultiProgramTools, calculate_contract, TERM_ARGUMENTS
from calc.contract_calculator import RECOGNITION_EARNED, RECOGNITION_METHODS


# Create the MCP server
server = Server("deferred-contract-calculator")

# Global tools instance (initialized on startup)
tools: MultiProgramTools | None = None


def get_tools() -> MultiProgramTools:
    """Get or initialize the tools instance."""
    global tools
    if tools is None:
        # Default program can be set via DEFERRED_CONTRACT_PROGRAM env var
        default_program = os.environ.get('DEFERRED_CONTRACT_PROGRAM')
        base_path = os.path.join(os.path.dirname(__file__), '..')
        tools = MultiProgramTools(base_path, default_program)
    return tools


# Common program parameter schema
PROGRAM_PARAM = {
    "type": "string",
    "description": "The program name (folder in input-parameters). If not specified, uses the default program. Use list_programs to see available programs."
}

RECOGNITION_PARAM = {
    "type": "string",
    "enum": list(RECOGNITION_METHODS),
    "description": "'earned' attributes each year's discounted deferral to the year it was earned (default); 'averaged' spreads the total evenly."
}

TERM_PROPERTIES = {
    "totalValue": {"type": "number", "description": "Total nominal contract value in dollars"},
    "years": {"type": "integer", "description": "Number of contract (earning) years, at least 1"},
    "deferralAmount": {"type": "number", "description": "Portion of the total value that is deferred"},
    "deferralStartYear": {"type": "integer", "description": "Years after the contract ends before payouts begin"},
    "payoutDuration": {"type": "integer", "description": "Number of years over which deferred money is paid, at least 1"},
    "interestRate": {"type": "number", "description": "Annual discount rate in percent, e.g. 4.43"},
}


@server.list_tools()
async def list_tools() -> list[Tool]:
    """List available contract calculator tools."""
    return [
        Tool(
            name="list_programs",
            description="List all saved contract programs with their terms. Use this to see which programs are available.",
            inputSchema={
                "type": "object",
                "properties": {},
                "required": []
            }
        ),
        Tool(
            name="reload_programs",
            description="Reload all contract programs from disk. Use this after adding, modifying, or removing program spec.json files to refresh the cache without restarting the server.",
            inputSchema={
                "type": "object",
                "properties": {},
                "required": []
            }
        ),
        Tool(
            name="get_contract_summary",
            description="Get the nominal AAV, tax (present value) AAV, total present value and effective discount of a saved contract program.",
            inputSchema={
                "type": "object",
                "properties": {
                    "program": PROGRAM_PARAM
                },
                "required": []
            }
        ),
        Tool(
            name="get_yearly_breakdown",
            description="Get the year-by-year schedule of a contract: cash salary, deferred amount earned, recognized tax value, cash received and cumulative cash received.",
            inputSchema={
                "type": "object",
                "properties": {
                    "year": {
                        "type": "integer",
                        "description": "Optional: timeline year (1-based). If omitted, returns all years."
                    },
                    "program": PROGRAM_PARAM
                },
                "required": []
            }
        ),
        Tool(
            name="calculate_contract",
            description="Calculate a contract from explicit terms without saving it. Returns the summary and the full yearly breakdown.",
            inputSchema={
                "type": "object",
                "properties": dict(TERM_PROPERTIES, recognition=RECOGNITION_PARAM),
                "required": list(TERM_ARGUMENTS)
            }
        ),
        Tool(
            name="compare_rates",
            description="Recalculate a contract at several discount rates to see how sensitive the tax AAV is to the rate.",
            inputSchema={
                "type": "object",
                "properties": {
                    "rates": {
                        "type": "array",
                        "items": {"type": "number"},
                        "description": "Discount rates in percent, e.g. [2.5, 4.43]"
                    },
                    "program": PROGRAM_PARAM
                },
                "required": ["rates"]
            }
        ),
        Tool(
            name="compare_programs",
            description="Compare two contract programs side by side and report which one carries the lower tax AAV.",
            inputSchema={
                "type": "object",
                "properties": {
                    "program1": {
                        "type": "string",
                        "description": "First program name to compare"
                    },
                    "program2": {
                        "type": "string",
                        "description": "Second program name to compare"
                    }
                },
                "required": ["program1", "program2"]
            }
        )
    ]


@server.call_tool()
async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
    """Handle tool calls."""
    try:
        contract_tools = get_tools()
        program = arguments.get("program")

        if name == "list_programs":
            result = contract_tools.list_programs()
        elif name == "reload_programs":
            result = contract_tools.reload_programs()
        elif name == "get_contract_summary":
            result = contract_tools.get_contract_summary(program)
        elif name == "get_yearly_breakdown":
            result = contract_tools.get_yearly_breakdown(arguments.get("year"), program)
        elif name == "calculate_contract":
            result = calculate_contract(arguments, arguments.get("recognition", RECOGNITION_EARNED))
        elif name == "compare_rates":
            result = contract_tools.compare_rates(arguments["rates"], program)
        elif name == "compare_programs":
            result = contract_tools.compare_programs(arguments["program1"], arguments["program2"])
        else:
            result = {"error": f"Unknown tool: {name}"}

        return [TextContent(
            type="text",
            text=json.dumps(result, indent=2, default=str)
        )]
    except Exception as e:
        return [TextContent(
            type="text",
            text=json.dumps({"error": str(e)}, indent=2)
        )]


async def main():
    """Run the MCP server."""
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())


if __name__ == "__main__":
    asyncio.run(main())
