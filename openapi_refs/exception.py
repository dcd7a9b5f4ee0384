from typing import List


class OpenApiRefsException(Exception):
    pass


class DocumentException(OpenApiRefsException):
    pass


class InvalidFilterException(OpenApiRefsException):
    pass


class UnknownCategoryException(OpenApiRefsException):
    pass


class ResolutionException(OpenApiRefsException):

    def __init__(self, message: str, chain: List[str]):
        super().__init__(message)
        self.chain = chain


class ReferenceCycleException(ResolutionException):

    def __init__(self, chain: List[str]):
        super().__init__("Reference cycle: {}".format(" -> ".join(chain)), chain)


class ResolutionDepthException(ResolutionException):

    def __init__(self, chain: List[str], max_hops: int):
        super().__init__("Exceeded {} hops while resolving {}".format(max_hops, chain[0]), chain)
        self.max_hops = max_hops
