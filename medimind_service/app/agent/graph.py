# app/agent/graph.py
from langgraph.graph import START, END, StateGraph
from langgraph.checkpoint.sqlite import SqliteSaver

from app.agent.state import AgentState
from app.agent.nodes import extract_node, remind_node
from app.db.db_config import get_sqlite_connection

builder = StateGraph(AgentState)

builder.add_node("extract", extract_node)
builder.add_node("remind", remind_node)

builder.add_edge(START, "extract")
builder.add_edge("extract", "remind")
builder.add_edge("remind", END)

# checkpoints double as the prescription store, one thread per prescription
conn = get_sqlite_connection()
memory = SqliteSaver(conn)

prescription_graph = builder.compile(checkpointer=memory)
