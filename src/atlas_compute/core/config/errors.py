"""
Exceções canônicas da camada de configuração do Atlas Compute.

As exceções deste módulo representam violações estruturais de configuração
(arquivo ausente, formato desconhecido, raiz inválida, conflito de merge,
definição de pipeline malformada). Nenhuma delas representa falha de
execução de algoritmo: essas viram `ExecutionResult` com falha, nunca exceção.

Invariantes:
    - Todas as exceções de configuração herdam de `ConfigError`
    - Mensagens apontam a chave ou o arquivo problemático
"""


class ConfigError(Exception):
    """
    Exceção base para erros de configuração.

    Permite captura genérica de falhas de load/merge/build sem confundi-las
    com falhas de execução de algoritmos.
    """


class DefaultsNotFoundError(ConfigError):
    """
    O arquivo de configuração base (defaults) não existe.

    O arquivo de defaults é obrigatório; o override local é opcional e
    sua ausência nunca gera erro.
    """


class UnsupportedConfigFormatError(ConfigError):
    """
    Extensão de arquivo não suportada pelo loader.

    Formatos aceitos (v1): `.yaml`, `.yml`, `.json`. O formato nunca é
    inferido pelo conteúdo.
    """


class InvalidConfigRootTypeError(ConfigError):
    """Conteúdo raiz do arquivo não é um mapa chave-valor (`dict`)."""


class ConfigTypeConflictError(ConfigError):
    """
    Conflito de tipos para a mesma chave durante o deep-merge.

    Exemplo:
        - base:     {"algorithms": {"PageRank": {"parameters": {...}}}}
        - override: {"algorithms": "PageRank"}

    Nenhum merge parcial é produzido.
    """


class PipelineConfigurationError(ConfigError):
    """
    Definição de pipeline inválida.

    Levantada pelo builder quando o pipeline nomeado não existe, quando um
    step não declara `algorithm`, quando o algoritmo não está registrado ou
    quando `parameters` não é um mapa.
    """
