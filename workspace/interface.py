from workspace.cards import Card


class Interface:

    def __init__(self):
        self.registry = None

    def onCardAdded(self, card: Card):
        """
        Invoked after a card was created and persisted.
        :param card:
        :return:
        """
        self.notifyRedraw()

    def onCardMoved(self, card: Card):
        """
        Invoked after a move (or reservoir drop) was committed.
        :param card:
        :return:
        """
        self.notifyRedraw()

    def onLayoutReset(self):
        self.notifyRedraw()

    def onPersistFailed(self):
        """
        Invoked when the layout could not be written. The change is kept in memory.
        :return:
        """
        pass

    def notifyRedraw(self):
        pass
