import concurrent.futures
import time

import config
import logutil


class SectorPatchMesher(object):
    """
    Builds the patch lists of every custom rendered block in a sector.

    Jobs cover batches of Y layers and run on a thread pool; all jobs share
    the same renderer bindings. `workers=0` builds on the calling thread.
    """

    def __init__(self, bindings, workers=None):
        self.bindings = dict(bindings)
        if workers is None:
            workers = getattr(config, 'PATCH_WORKERS', 4)
        self.workers = workers
        if workers > 0:
            self.executor = concurrent.futures.ThreadPoolExecutor(
                max_workers=workers, thread_name_prefix="PatchWorker",
            )
        else:
            self.executor = None
        self.stats = {'sectors': 0, 'blocks': 0, 'patches': 0, 'shared': 0}

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def close(self):
        if self.executor is not None:
            self.executor.shutdown(wait=True)
            self.executor = None

    def _targets(self, sector):
        """Return (local position, binding) for blocks with a renderer for their data value."""
        targets = []
        for local, block_id, data in sector.local_blocks():
            binding = self.bindings.get(block_id)
            if binding is not None and binding.handles(data):
                targets.append((local, binding))
        return targets

    @staticmethod
    def _build_job(sector, targets):
        results = []
        for local, binding in targets:
            ctx = sector.context_at(*local)
            results.append((sector.world_position(local), binding.get_render_patch_list(ctx)))
        return results

    def build(self, sector):
        """Return {world position: patch list}. A failing renderer raises here."""
        start = time.perf_counter()
        targets = self._targets(sector)
        layers = max(1, getattr(config, 'PATCH_LAYERS_PER_JOB', 8))
        batches = {}
        for local, binding in targets:
            batches.setdefault(local[1] // layers, []).append((local, binding))
        if self.executor is None:
            chunks = [self._build_job(sector, batch) for batch in batches.values()]
        else:
            futures = [self.executor.submit(self._build_job, sector, batch) for batch in batches.values()]
            chunks = [fut.result() for fut in futures]
        result = {}
        seen = set()
        shared = 0
        patch_count = 0
        for chunk in chunks:
            for pos, patches in chunk:
                result[pos] = patches
                patch_count += len(patches)
                if id(patches) in seen:
                    shared += 1
                else:
                    seen.add(id(patches))
        self.stats['sectors'] += 1
        self.stats['blocks'] += len(result)
        self.stats['patches'] += patch_count
        self.stats['shared'] += shared
        if getattr(config, 'LOG_PATCH_BUILD', False):
            elapsed_ms = (time.perf_counter() - start) * 1000.0
            logutil.log(
                "MESH",
                f"sector={sector.position} blocks={len(result)} patches={patch_count} "
                f"shared={shared} jobs={len(batches)} ms={elapsed_ms:.2f}",
            )
        return result
