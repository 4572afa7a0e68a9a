"""
boardai/ai/__init__.py - AI decision core

This package provides the static move evaluator, the pluggable search
strategies and the orchestrator that runs the win / block / search /
fallback pipeline.
"""

from boardai.ai.evaluator import MoveEvaluator
from boardai.ai.orchestrator import AIDecision, AIOrchestrator, AIStage
from boardai.ai.strategies import SearchStats, SearchStrategy, create_strategy
from boardai.ai.trio_ai import TrioAI

__all__ = ['MoveEvaluator', 'AIDecision', 'AIOrchestrator', 'AIStage',
           'SearchStats', 'SearchStrategy', 'create_strategy', 'TrioAI']
