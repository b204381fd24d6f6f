# src/atlas_compute/algorithms/graph/pagerank.py
"""
PageRank — centralidade por power iteration.

Algoritmo:
    1. Índice denso 0..n-1 para os ids de nó (ordem de `node_ids()`)
    2. Lista de arestas (origem, destino) em índices, ignorando vizinhos
       fora do índice; grau de saída por `np.bincount` das origens
    3. Scores iniciais 1/n
    4. A cada iteração:
        - dangling_sum = soma dos scores dos nós com grau de saída 0
        - base = (1 - d + d * dangling_sum) / n
        - novo[i] = base + d * Σ score[j] / grau[j] para j → i
          (agregação pelos destinos: adjacência de entrada invertida)
        - max_delta = max |novo - atual|; troca dos buffers
        - progresso = iterações / maxIterations
        - para quando max_delta < tolerance (converged = True)

A massa dos nós dangling é redistribuída uniformemente entre todos os nós
a cada iteração; nenhuma outra convenção é aplicada.

Parâmetros:
    - dampingFactor (float, 0.85): em [0, 1]
    - maxIterations (int, 100): >= 1
    - tolerance (float, 1e-6): >= 0

Saída:
    - grafo novo com todos os nós/arestas copiados e a propriedade `pagerank`
    - métricas: iterations, converged, maxDelta, nodeCount, topNodes
      (até 10 pares (id, score) em ordem decrescente de score)
    - grafo vazio ⇒ apenas métricas (iterations=0, converged=True, maxDelta=0.0)
"""

from __future__ import annotations

from typing import Any, Dict, List, Tuple

import numpy as np

from atlas_compute.core.algorithm.base import GraphAlgorithm
from atlas_compute.core.algorithm.context import ExecutionContext
from atlas_compute.core.algorithm.types import AlgorithmOutput, ParameterDescriptor
from atlas_compute.core.datasets.types import GraphDataset

PAGERANK_PROPERTY = "pagerank"
TOP_NODES = 10


class PageRankAlgorithm(GraphAlgorithm):
    name = "PageRank"
    description = "Computes PageRank centrality scores for all nodes in a directed graph."
    output_suffix = "PageRank"
    parameters = (
        ParameterDescriptor("dampingFactor", "Probability of following a link (0-1)", float, False, 0.85),
        ParameterDescriptor("maxIterations", "Maximum number of iterations", int, False, 100),
        ParameterDescriptor("tolerance", "Convergence threshold (max delta between iterations)", float, False, 1e-6),
    )

    def validate_parameters(self, context: ExecutionContext) -> List[str]:
        violations = super().validate_parameters(context)
        damping = context.get("dampingFactor", 0.85)
        max_iter = context.get("maxIterations", 100)
        tolerance = context.get("tolerance", 1e-6)
        if not 0.0 <= damping <= 1.0:
            violations.append(f"dampingFactor ({damping}) must be between 0 and 1.")
        if max_iter < 1:
            violations.append(f"maxIterations ({max_iter}) must be at least 1.")
        if not tolerance >= 0.0:
            violations.append(f"tolerance ({tolerance}) must be non-negative.")
        return violations

    def _execute_graph(self, dataset: GraphDataset, context: ExecutionContext) -> AlgorithmOutput:
        damping = context.get("dampingFactor", 0.85)
        max_iter = context.get("maxIterations", 100)
        tolerance = context.get("tolerance", 1e-6)

        node_ids = list(dataset.node_ids())
        n = len(node_ids)
        if n == 0:
            return AlgorithmOutput(
                metrics={"iterations": 0, "converged": True, "maxDelta": 0.0, "nodeCount": 0}
            )

        sources, targets = self._edge_index(dataset, node_ids)
        out_degree = np.bincount(sources, minlength=n)
        dangling = out_degree == 0
        # peso de cada aresta: 1 / grau de saída da origem (origem nunca é dangling)
        edge_weight = 1.0 / out_degree[sources]

        scores = np.full(n, 1.0 / n)
        iterations = 0
        max_delta = 0.0
        converged = False

        for _ in range(max_iter):
            context.raise_if_cancelled()

            dangling_sum = scores[dangling].sum()
            base = (1.0 - damping + damping * dangling_sum) / n
            incoming = np.bincount(targets, weights=scores[sources] * edge_weight, minlength=n)
            new_scores = base + damping * incoming

            max_delta = float(np.abs(new_scores - scores).max())
            scores = new_scores
            iterations += 1
            context.report_progress(iterations / max_iter)

            if max_delta < tolerance:
                converged = True
                break

        ranks = {node_id: float(scores[i]) for i, node_id in enumerate(node_ids)}
        output = self._copy_with_node_property(
            dataset, self._resolve_output_name(dataset, context), PAGERANK_PROPERTY, ranks
        )

        metrics: Dict[str, Any] = {
            "iterations": iterations,
            "converged": converged,
            "maxDelta": max_delta,
            "nodeCount": n,
            "topNodes": self._top_nodes(node_ids, scores, min(TOP_NODES, n)),
        }
        return AlgorithmOutput(output_dataset=output, metrics=metrics)

    @staticmethod
    def _edge_index(dataset: GraphDataset, node_ids: List[str]) -> Tuple[np.ndarray, np.ndarray]:
        index = {node_id: i for i, node_id in enumerate(node_ids)}
        sources: List[int] = []
        targets: List[int] = []
        for i, node_id in enumerate(node_ids):
            for neighbor in dataset.out_neighbors(node_id):
                j = index.get(neighbor)
                if j is not None:
                    sources.append(i)
                    targets.append(j)
        return np.asarray(sources, dtype=np.intp), np.asarray(targets, dtype=np.intp)

    @staticmethod
    def _top_nodes(node_ids: List[str], scores: np.ndarray, count: int) -> List[Tuple[str, float]]:
        # argsort estável sobre -score: empates mantêm a ordem dos nós
        order = np.argsort(-scores, kind="stable")[:count]
        return [(node_ids[i], float(scores[i])) for i in order]
