"""Main entry point for the thread simulator FastAPI application.

This module creates the FastAPI app that exposes the conversation/thread
state engine: the chat list, conversations, reactions and the simulation
that generates inbound traffic and delivery updates.

Configuration is read from THREADSIM_* environment variables, optionally
from a .env file in the working directory.

To run the development server:
    uvicorn main:app --reload

To run in production:
    uvicorn main:app --host 0.0.0.0 --port 8000
"""

import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from pydantic import ValidationError

from api.dependencies import initialize_simulation_engine, shutdown_simulation_engine
from api.exceptions import (
    MessageNotFoundError,
    SimulationNotRunningError,
    ThreadNotFoundError,
    generic_exception_handler,
    message_not_found_handler,
    runtime_error_handler,
    simulation_not_running_handler,
    thread_not_found_handler,
    validation_exception_handler,
    value_error_handler,
)
from api.routes import conversations as conversation_routes
from api.routes import simulation as simulation_routes
from api.routes import threads as thread_routes

logger = logging.getLogger(__name__)

load_dotenv()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the simulation engine at startup and stop it at shutdown.

    Args:
        app: The FastAPI application instance.

    Yields:
        Control back to FastAPI to handle requests.
    """
    logger.info("Starting thread simulator - initializing SimulationEngine")
    initialize_simulation_engine()

    yield

    logger.info("Shutting down thread simulator")
    shutdown_simulation_engine()


app = FastAPI(
    title="Thread Simulator",
    description="Conversation and thread state engine with simulated inbound traffic",
    version="0.1.0",
    lifespan=lifespan,
)

# Specific exceptions before general ones
app.add_exception_handler(ThreadNotFoundError, thread_not_found_handler)
app.add_exception_handler(MessageNotFoundError, message_not_found_handler)
app.add_exception_handler(SimulationNotRunningError, simulation_not_running_handler)
app.add_exception_handler(ValidationError, validation_exception_handler)
app.add_exception_handler(ValueError, value_error_handler)
app.add_exception_handler(RuntimeError, runtime_error_handler)
app.add_exception_handler(Exception, generic_exception_handler)

app.include_router(thread_routes.router)
app.include_router(conversation_routes.router)
app.include_router(simulation_routes.router)


@app.get("/")
async def root():
    return {
        "message": "Welcome to the Thread Simulator API",
        "version": "0.1.0",
        "docs_url": "/docs",
    }


@app.get("/health")
async def health_check():
    """Health check endpoint for monitoring."""
    return {"status": "healthy"}
